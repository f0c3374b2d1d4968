"""Notification text and routing for each action kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .details import (
    AlertDetails,
    BreakdownDetails,
    CompleteDetails,
    ContactDetails,
    FpqcDetails,
    PauseDetails,
    QcCheckDetails,
    ResumeDetails,
    SetupDetails,
    TestDetails,
)
from .models import NotificationPriority, NotificationTarget

# Severity or issue type -> priority; anything unlisted is normal
PRIORITY_BY_LEVEL = {
    'critical': NotificationPriority.CRITICAL,
    'emergency': NotificationPriority.CRITICAL,
    'high': NotificationPriority.HIGH,
    'technical': NotificationPriority.HIGH,
}


def priority_for(level) -> int:
    return PRIORITY_BY_LEVEL.get(str(level or '').strip().lower(), NotificationPriority.NORMAL)


@dataclass(frozen=True)
class NotificationDraft:
    message: str
    target: int
    category: str
    priority: int = NotificationPriority.NORMAL


def _setup(d: SetupDetails):
    return NotificationDraft(f"Setup started: {d.message}", NotificationTarget.ALL, 'setup')


def _fpqc(d: FpqcDetails):
    return NotificationDraft(
        f"FPQC Required - {d.actual_quantity} pieces produced", NotificationTarget.QC, 'fpqc'
    )


def _pause(d: PauseDetails):
    return NotificationDraft(f"Job paused: {d.reason_label}", NotificationTarget.ALL, 'pause')


def _resume(d: ResumeDetails):
    text = f"Job resumed: {d.remarks}" if d.remarks else "Job resumed"
    return NotificationDraft(text, NotificationTarget.ALL, 'resume')


def _breakdown(d: BreakdownDetails):
    return NotificationDraft(
        f"Machine Breakdown - {d.remarks}",
        NotificationTarget.MAINTENANCE,
        'breakdown',
        NotificationPriority.CRITICAL,
    )


def _complete(d: CompleteDetails):
    text = f"Job Completed: {d.final_quantity} pcs"
    if d.reject_quantity:
        text += f" ({d.reject_quantity} rejected)"
    return NotificationDraft(text, NotificationTarget.ALL, 'complete')


def _qc_check(d: QcCheckDetails):
    return NotificationDraft(f"QC Check Requested: {d.message}", NotificationTarget.QC, 'qc_check')


def _test(d: TestDetails):
    if not d.failed:
        return None
    return NotificationDraft(
        f"Quality Test Failed: {d.test_type} = {d.test_value} {d.test_unit}",
        NotificationTarget.QC,
        'test',
    )


def _alert(d: AlertDetails):
    return NotificationDraft(
        f"{d.severity.upper()} Alert: {d.issue_type} - {d.description}",
        NotificationTarget.ALL,
        'alert',
        priority_for(d.severity),
    )


def _contact(d: ContactDetails):
    return NotificationDraft(
        f"Supervisor Help Requested: {d.issue_type} - {d.message}",
        NotificationTarget.SUPERVISORS,
        'contact',
        priority_for(d.issue_type),
    )


TEMPLATES = {
    SetupDetails: _setup,
    FpqcDetails: _fpqc,
    PauseDetails: _pause,
    ResumeDetails: _resume,
    BreakdownDetails: _breakdown,
    CompleteDetails: _complete,
    QcCheckDetails: _qc_check,
    TestDetails: _test,
    AlertDetails: _alert,
    ContactDetails: _contact,
}


def build_notification(details) -> Optional[NotificationDraft]:
    """Return the notification an action emits, or ``None`` for silent ones."""
    try:
        render = TEMPLATES[type(details)]
    except KeyError:
        raise TypeError(f"No notification template for {type(details).__name__}")
    return render(details)
