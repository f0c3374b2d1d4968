# jobs/forms.py
"""One form per tablet action.

The forms only validate fields.  Whether the action is allowed at all is
decided by ``jobs.state_machine`` before a form is ever bound.
"""

from django import forms

from .exceptions import MissingRequiredField, ValidationFailed
from .models import Alert, ContactRequest, PauseReason, QualityTest


class LowercaseChoiceField(forms.ChoiceField):
    """Choice field that accepts any letter case, e.g. ``PASS``."""

    def to_python(self, value):
        return super().to_python(value).strip().lower()


def _text(max_length, required, label):
    return forms.CharField(
        max_length=max_length,
        required=required,
        error_messages={
            'required': f'{label} is required',
            'max_length': f'{label} must be {max_length} characters or less',
        },
    )


def _moment(label):
    return forms.DateTimeField(
        required=False,
        error_messages={'invalid': f'{label} is not a valid date and time'},
    )


class SetupForm(forms.Form):
    message = _text(20, True, 'Setup message')
    remarks = _text(100, False, 'Setup remarks')
    started_at = _moment('Start time')


class FpqcForm(forms.Form):
    actual_quantity = forms.IntegerField(
        min_value=1,
        error_messages={
            'required': 'Actual quantity is required',
            'invalid': 'Actual quantity must be a whole number',
            'min_value': 'Actual quantity must be greater than 0',
        },
    )
    qc_quantity = forms.IntegerField(
        required=False,
        min_value=0,
        error_messages={
            'invalid': 'QC quantity must be a whole number',
            'min_value': 'QC quantity cannot be negative',
        },
    )
    reject_quantity = forms.IntegerField(
        required=False,
        min_value=0,
        error_messages={
            'invalid': 'Reject quantity must be a whole number',
            'min_value': 'Reject quantity cannot be negative',
        },
    )
    nc_quantity = forms.IntegerField(
        required=False,
        min_value=0,
        error_messages={
            'invalid': 'NC quantity must be a whole number',
            'min_value': 'NC quantity cannot be negative',
        },
    )
    remarks = _text(255, False, 'FPQC remarks')
    reason = _text(255, False, 'FPQC reason')

    def clean(self):
        cleaned = super().clean()
        actual = cleaned.get('actual_quantity')
        qc = cleaned.get('qc_quantity')
        if actual is not None and qc is not None and qc > actual:
            self.add_error('qc_quantity', 'QC quantity cannot exceed actual quantity')
            return cleaned
        checked = (cleaned.get('reject_quantity') or 0) + (cleaned.get('nc_quantity') or 0)
        if qc is not None and checked > qc:
            self.add_error('reject_quantity', 'Reject and NC quantities cannot exceed QC quantity')
        return cleaned


class PauseForm(forms.Form):
    reason = forms.TypedChoiceField(
        choices=PauseReason.choices,
        coerce=int,
        error_messages={
            'required': 'Pause reason is required',
            'invalid_choice': 'Invalid pause reason',
        },
    )
    remarks = _text(20, False, 'Pause remarks')
    paused_at = _moment('Pause time')


class ResumeForm(forms.Form):
    remarks = _text(150, False, 'Resume remarks')
    resumed_at = _moment('Resume time')


class BreakdownForm(forms.Form):
    remarks = _text(200, True, 'Breakdown remarks')
    breakdown_at = _moment('Breakdown time')


class CompleteForm(forms.Form):
    # No upper bound: overproduction is recorded as reported
    final_quantity = forms.IntegerField(
        min_value=1,
        error_messages={
            'required': 'Final quantity is required',
            'invalid': 'Final quantity must be a whole number',
            'min_value': 'Final quantity must be greater than 0',
        },
    )
    reject_quantity = forms.IntegerField(
        required=False,
        min_value=0,
        error_messages={
            'invalid': 'Reject quantity must be a whole number',
            'min_value': 'Reject quantity cannot be negative',
        },
    )
    remarks = _text(200, False, 'Completion remarks')


class QcCheckForm(forms.Form):
    message = _text(100, True, 'QC check message')
    remarks = _text(200, False, 'QC check remarks')
    requested_at = _moment('Request time')


class TestForm(forms.Form):
    __test__ = False  # not a pytest class

    test_type = forms.ChoiceField(
        choices=QualityTest.TEST_TYPE_CHOICES,
        error_messages={
            'required': 'Test type is required',
            'invalid_choice': 'Invalid test type',
        },
    )
    test_value = forms.DecimalField(
        max_digits=12,
        decimal_places=4,
        error_messages={
            'required': 'Test value is required',
            'invalid': 'Test value must be a number',
        },
    )
    test_unit = forms.ChoiceField(
        choices=QualityTest.UNIT_CHOICES,
        error_messages={
            'required': 'Test unit is required',
            'invalid_choice': 'Invalid test unit',
        },
    )
    result = LowercaseChoiceField(
        choices=QualityTest.RESULT_CHOICES,
        error_messages={
            'required': 'Test result is required',
            'invalid_choice': 'Test result must be pass or fail',
        },
    )


class AlertForm(forms.Form):
    issue_type = _text(50, True, 'Issue type')
    severity = LowercaseChoiceField(
        choices=Alert.SEVERITY_CHOICES,
        error_messages={
            'required': 'Severity is required',
            'invalid_choice': 'Severity must be low, medium, high or critical',
        },
    )
    description = _text(500, True, 'Alert description')


class ContactForm(forms.Form):
    issue_type = LowercaseChoiceField(
        choices=ContactRequest.ISSUE_TYPE_CHOICES,
        error_messages={
            'required': 'Issue type is required',
            'invalid_choice': 'Invalid issue type',
        },
    )
    message = _text(500, True, 'Message')


ACTION_FORMS = {
    'setup': SetupForm,
    'fpqc': FpqcForm,
    'pause': PauseForm,
    'resume': ResumeForm,
    'breakdown': BreakdownForm,
    'complete': CompleteForm,
    'qc_check': QcCheckForm,
    'test': TestForm,
    'alert': AlertForm,
    'contact': ContactForm,
}


def validate_action_fields(action: str, data) -> dict:
    """Bind and validate the form for ``action``; return cleaned data.

    The first failing field in validation order is reported: a missing
    value raises ``MissingRequiredField``, anything else ``ValidationFailed``.
    """
    form = ACTION_FORMS[action](data=data or {})
    if form.is_valid():
        return form.cleaned_data
    for field, errors in form.errors.as_data().items():
        error = errors[0]
        message = error.messages[0]
        if error.code == 'required':
            raise MissingRequiredField(field, message)
        raise ValidationFailed(field, message)
    raise ValidationFailed('__all__', 'Invalid input')
