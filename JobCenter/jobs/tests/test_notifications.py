from datetime import datetime, timezone
from decimal import Decimal

import pytest

from jobs.details import (
    ActionDetails,
    AlertDetails,
    BreakdownDetails,
    CompleteDetails,
    ContactDetails,
    ResumeDetails,
    SetupDetails,
    TestDetails,
)
from jobs.models import NotificationTarget
from jobs.notifications import TEMPLATES, build_notification, priority_for
from jobs.state_machine import ACTIONS

NOW = datetime(2026, 3, 2, 8, 30, tzinfo=timezone.utc)


def test_every_action_payload_has_a_template():
    payload_types = ActionDetails.__subclasses__()
    assert set(TEMPLATES) == set(payload_types)
    assert {t.action for t in payload_types} == set(ACTIONS)


def test_unknown_payload_type_is_rejected():
    with pytest.raises(TypeError):
        build_notification(object())


@pytest.mark.parametrize('level, expected', [
    ('critical', 1),
    ('CRITICAL', 1),
    ('emergency', 1),
    ('high', 2),
    ('technical', 2),
    ('medium', 0),
    ('low', 0),
    ('quality', 0),
    ('', 0),
    (None, 0),
])
def test_priority_table(level, expected):
    assert priority_for(level) == expected


def test_alert_text_and_priority():
    draft = build_notification(AlertDetails(issue_type='Coolant leak', severity='critical', description='Floor wet'))
    assert draft.message == 'CRITICAL Alert: Coolant leak - Floor wet'
    assert draft.priority == 1
    assert draft.target == NotificationTarget.ALL
    assert draft.category == 'alert'


def test_contact_goes_to_supervisors():
    draft = build_notification(ContactDetails(issue_type='technical', message='Spindle noise'))
    assert draft.message == 'Supervisor Help Requested: technical - Spindle noise'
    assert draft.target == NotificationTarget.SUPERVISORS
    assert draft.priority == 2


def test_breakdown_goes_to_maintenance_as_critical():
    draft = build_notification(BreakdownDetails(remarks='motor fault', breakdown_at=NOW, ticket_reference='MT-000001'))
    assert draft.message == 'Machine Breakdown - motor fault'
    assert draft.target == NotificationTarget.MAINTENANCE
    assert draft.priority == 1


def test_setup_text():
    draft = build_notification(SetupDetails(message='Tool change', remarks='ok', started_at=NOW))
    assert draft.message == 'Setup started: Tool change'


def test_resume_text_with_and_without_remarks():
    bare = ResumeDetails(remarks='', resumed_at=NOW, restored_status=5, pause_minutes=0)
    noted = ResumeDetails(remarks='back', resumed_at=NOW, restored_status=5, pause_minutes=3)
    assert build_notification(bare).message == 'Job resumed'
    assert build_notification(noted).message == 'Job resumed: back'


def test_complete_text_mentions_rejects_only_when_present():
    clean = CompleteDetails(final_quantity=120, reject_quantity=0, remarks='', completion_percent=120.0, ended_at=NOW)
    rejects = CompleteDetails(final_quantity=95, reject_quantity=5, remarks='', completion_percent=95.0, ended_at=NOW)
    assert build_notification(clean).message == 'Job Completed: 120 pcs'
    assert build_notification(rejects).message == 'Job Completed: 95 pcs (5 rejected)'


def test_passing_test_is_silent_and_failing_test_alerts_qc():
    passed = TestDetails(test_type='hardness', test_value=Decimal('45.5'), test_unit='HRC', result='pass')
    failed = TestDetails(test_type='hardness', test_value=Decimal('39'), test_unit='HRC', result='fail')
    assert build_notification(passed) is None
    draft = build_notification(failed)
    assert draft.message == 'Quality Test Failed: hardness = 39 HRC'
    assert draft.target == NotificationTarget.QC


def test_details_serialise_to_json_friendly_values():
    payload = TestDetails(test_type='torque', test_value=Decimal('12.50'), test_unit='Nm', result='pass').as_dict()
    assert payload == {'test_type': 'torque', 'test_value': '12.50', 'test_unit': 'Nm', 'result': 'pass'}
    assert SetupDetails(message='m', remarks='', started_at=NOW).as_dict()['started_at'] == NOW.isoformat()
