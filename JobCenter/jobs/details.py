"""Typed payloads captured by each action.

One frozen dataclass per action kind.  The payload is what the audit
record stores in ``ActionRecord.details``, what the notification text is
rendered from, and what the API echoes back on success.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


def _jsonable(value):
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


class ActionDetails:
    action = ''

    def as_dict(self) -> dict:
        return {f.name: _jsonable(getattr(self, f.name)) for f in dataclasses.fields(self)}


@dataclass(frozen=True)
class SetupDetails(ActionDetails):
    message: str
    remarks: str
    started_at: datetime
    action = 'setup'


@dataclass(frozen=True)
class FpqcDetails(ActionDetails):
    actual_quantity: int
    qc_quantity: Optional[int]
    reject_quantity: Optional[int]
    nc_quantity: Optional[int]
    remarks: str
    reason: str
    revision: int
    action = 'fpqc'


@dataclass(frozen=True)
class PauseDetails(ActionDetails):
    reason: int
    reason_label: str
    remarks: str
    paused_at: datetime
    action = 'pause'


@dataclass(frozen=True)
class ResumeDetails(ActionDetails):
    remarks: str
    resumed_at: datetime
    restored_status: int
    pause_minutes: int
    action = 'resume'


@dataclass(frozen=True)
class BreakdownDetails(ActionDetails):
    remarks: str
    breakdown_at: datetime
    ticket_reference: str
    action = 'breakdown'


@dataclass(frozen=True)
class CompleteDetails(ActionDetails):
    final_quantity: int
    reject_quantity: int
    remarks: str
    completion_percent: float
    ended_at: datetime
    action = 'complete'


@dataclass(frozen=True)
class QcCheckDetails(ActionDetails):
    message: str
    remarks: str
    requested_at: datetime
    revision: int
    action = 'qc_check'


@dataclass(frozen=True)
class TestDetails(ActionDetails):
    test_type: str
    test_value: Decimal
    test_unit: str
    result: str
    action = 'test'
    __test__ = False  # not a pytest class

    @property
    def failed(self) -> bool:
        return self.result == 'fail'


@dataclass(frozen=True)
class AlertDetails(ActionDetails):
    issue_type: str
    severity: str
    description: str
    action = 'alert'


@dataclass(frozen=True)
class ContactDetails(ActionDetails):
    issue_type: str
    message: str
    action = 'contact'

