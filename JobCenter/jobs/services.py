"""Job action processing.

``JobActionProcessor.perform`` runs one tablet action as a single unit:
lock the operation row, check the status transition, validate the
action's fields, then write the operation, its side records, one audit
record and at most one notification.  Any failure leaves no trace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import DatabaseError
from django.utils import timezone

from maintenance.models import DowntimeRecord
from .conf import job_center_setting
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
from .exceptions import JobActionError, OperationNotFound, PersistenceFailure, Unauthorized
from .forms import validate_action_fields
from .models import (
    Alert,
    ContactRequest,
    OperationStatus,
    PauseReason,
    QualityCheck,
    QualityTest,
    status_label,
)
from .notifications import build_notification
from .queries import parse_operation_id
from .state_machine import apply_transition, check_transition, get_transition
from .store import OperationStore

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES = {
    'setup': 'Setup started successfully',
    'fpqc': 'FPQC submitted successfully',
    'pause': 'Job paused successfully',
    'resume': 'Job resumed successfully',
    'breakdown': 'Breakdown reported successfully',
    'complete': 'Job completed successfully',
    'qc_check': 'QC check requested successfully',
    'test': 'Test result recorded successfully',
    'alert': 'Alert raised successfully',
    'contact': 'Supervisor contacted successfully',
}


@dataclass
class ActionResult:
    operation_id: int
    action: str
    previous_status: int
    new_status: int
    hold_flag: Optional[int]
    details: dict = field(default_factory=dict)
    notification_id: Optional[int] = None

    @property
    def message(self) -> str:
        return SUCCESS_MESSAGES[self.action]

    def as_dict(self) -> dict:
        return {
            'operation_id': self.operation_id,
            'action': self.action,
            'previous_status': self.previous_status,
            'new_status': self.new_status,
            'new_status_label': status_label(self.new_status),
            'hold_flag': self.hold_flag,
            'notification_id': self.notification_id,
            **self.details,
        }


class JobActionProcessor:
    """Apply operator actions to operations through an ``OperationStore``."""

    def __init__(self, store: Optional[OperationStore] = None, allow_breakdown_while_paused: Optional[bool] = None):
        self.store = store or OperationStore()
        if allow_breakdown_while_paused is None:
            allow_breakdown_while_paused = bool(job_center_setting('ALLOW_BREAKDOWN_WHILE_PAUSED'))
        self.allow_breakdown_while_paused = allow_breakdown_while_paused

    def perform(self, action: str, operation_id, operator: str, data=None) -> ActionResult:
        try:
            if not (operator or '').strip():
                raise Unauthorized()
            get_transition(action)
            op_id = parse_operation_id(operation_id)
            result = self._run(action, op_id, operator.strip(), data or {})
        except JobActionError as exc:
            logger.warning(
                "Rejected %s on operation %s by %r: %s (%s)",
                action, operation_id, operator, exc.code, exc.message,
            )
            raise
        logger.info(
            "Operation %s: %s by %r, %s -> %s",
            result.operation_id, action, operator,
            status_label(result.previous_status), status_label(result.new_status),
        )
        return result

    def _run(self, action, op_id, operator, data) -> ActionResult:
        store = self.store
        try:
            with store.atomic():
                operation = store.lock_operation(op_id)
                if operation is None:
                    raise OperationNotFound(op_id)
                previous = operation.status
                transition = check_transition(
                    action, previous,
                    allow_breakdown_while_paused=self.allow_breakdown_while_paused,
                )
                cleaned = validate_action_fields(action, data)
                new_status, new_hold = apply_transition(transition, previous, operation.hold_flag)
                now = timezone.now()

                handler = getattr(self, f'_apply_{action}')
                details, changed = handler(operation, cleaned, operator, now, new_status)

                operation.status = new_status
                operation.hold_flag = new_hold
                store.save_operation(operation, set(changed) | {'status', 'hold_flag'})

                store.append_action(
                    operation, action, operator, now,
                    from_status=previous, to_status=new_status, details=details.as_dict(),
                )
                notification_id = None
                draft = build_notification(details)
                if draft is not None:
                    notification = store.publish(
                        operation.pk, draft.message, draft.target, draft.category, draft.priority, created_at=now,
                    )
                    notification_id = notification.pk
        except DatabaseError:
            logger.exception("Database error while running %s on operation %s", action, op_id)
            raise PersistenceFailure() from None

        return ActionResult(
            operation_id=operation.pk,
            action=action,
            previous_status=int(previous),
            new_status=int(new_status),
            hold_flag=int(new_hold) if new_hold else None,
            details=details.as_dict(),
            notification_id=notification_id,
        )

    # ------------------------------------------------------------------
    # Per-action bookkeeping.  Each returns ``(details, changed_fields)``.
    # ------------------------------------------------------------------
    def _apply_setup(self, operation, cleaned, operator, now, new_status):
        started_at = cleaned.get('started_at') or now
        operation.started_at = started_at
        operation.message = cleaned['message']
        operation.remarks = cleaned.get('remarks') or ''
        details = SetupDetails(
            message=operation.message,
            remarks=operation.remarks,
            started_at=started_at,
        )
        return details, ['started_at', 'message', 'remarks']

    def _apply_fpqc(self, operation, cleaned, operator, now, new_status):
        actual = cleaned['actual_quantity']
        revision = self.store.next_revision(operation, 'fpqc')
        check = QualityCheck(
            operation=operation,
            kind='fpqc',
            revision=revision,
            actual_quantity=actual,
            qc_quantity=cleaned.get('qc_quantity'),
            reject_quantity=cleaned.get('reject_quantity'),
            nc_quantity=cleaned.get('nc_quantity'),
            remarks=cleaned.get('remarks') or '',
            reason=cleaned.get('reason') or '',
            requested_by=operator,
            requested_at=now,
        )
        self.store.add(check)
        operation.actual_quantity = actual
        details = FpqcDetails(
            actual_quantity=actual,
            qc_quantity=check.qc_quantity,
            reject_quantity=check.reject_quantity,
            nc_quantity=check.nc_quantity,
            remarks=check.remarks,
            reason=check.reason,
            revision=revision,
        )
        return details, ['actual_quantity']

    def _apply_pause(self, operation, cleaned, operator, now, new_status):
        paused_at = cleaned.get('paused_at') or now
        reason = PauseReason(cleaned['reason'])
        remarks = cleaned.get('remarks') or ''
        operation.paused_at = paused_at
        operation.pause_reason = reason
        downtime_reason = f"{reason.label}: {remarks}" if remarks else reason.label
        self.store.open_downtime(operation, DowntimeRecord.KIND_PAUSE, downtime_reason, paused_at, operator)
        details = PauseDetails(
            reason=int(reason),
            reason_label=reason.label,
            remarks=remarks,
            paused_at=paused_at,
        )
        return details, ['paused_at', 'pause_reason']

    def _apply_resume(self, operation, cleaned, operator, now, new_status):
        resumed_at = cleaned.get('resumed_at') or now
        minutes = self._end_pause(operation, resumed_at)
        operation.resumed_at = resumed_at
        details = ResumeDetails(
            remarks=cleaned.get('remarks') or '',
            resumed_at=resumed_at,
            restored_status=int(new_status),
            pause_minutes=minutes,
        )
        return details, ['resumed_at', 'pause_reason', 'total_pause_minutes']

    def _apply_breakdown(self, operation, cleaned, operator, now, new_status):
        breakdown_at = cleaned.get('breakdown_at') or now
        remarks = cleaned['remarks']
        ticket = self.store.open_ticket(operation, remarks, operator, breakdown_at)
        self.store.open_downtime(
            operation, DowntimeRecord.KIND_BREAKDOWN, remarks, breakdown_at, operator, ticket=ticket,
        )
        operation.breakdown_at = breakdown_at
        details = BreakdownDetails(
            remarks=remarks,
            breakdown_at=breakdown_at,
            ticket_reference=ticket.reference,
        )
        return details, ['breakdown_at']

    def _apply_complete(self, operation, cleaned, operator, now, new_status):
        final = cleaned['final_quantity']
        reject = cleaned.get('reject_quantity') or 0
        remarks = cleaned.get('remarks') or ''
        # Completing a paused job ends its pause interval too
        self._end_pause(operation, now)
        operation.actual_quantity = final
        operation.reject_quantity = reject
        operation.ended_at = now
        if remarks:
            operation.remarks = remarks
        if operation.planned_quantity > 0:
            percent = round(final / operation.planned_quantity * 100, 1)
        else:
            percent = 0
        operation.completion_percent = percent
        details = CompleteDetails(
            final_quantity=final,
            reject_quantity=reject,
            remarks=remarks,
            completion_percent=percent,
            ended_at=now,
        )
        return details, [
            'actual_quantity', 'reject_quantity', 'ended_at', 'remarks',
            'completion_percent', 'pause_reason', 'total_pause_minutes',
        ]

    def _apply_qc_check(self, operation, cleaned, operator, now, new_status):
        requested_at = cleaned.get('requested_at') or now
        revision = self.store.next_revision(operation, 'qc_check')
        self.store.add(QualityCheck(
            operation=operation,
            kind='qc_check',
            revision=revision,
            message=cleaned['message'],
            remarks=cleaned.get('remarks') or '',
            requested_by=operator,
            requested_at=requested_at,
        ))
        operation.qc_requested_at = requested_at
        operation.message = cleaned['message']
        details = QcCheckDetails(
            message=cleaned['message'],
            remarks=cleaned.get('remarks') or '',
            requested_at=requested_at,
            revision=revision,
        )
        return details, ['qc_requested_at', 'message']

    def _apply_test(self, operation, cleaned, operator, now, new_status):
        test = self.store.add(QualityTest(
            operation=operation,
            test_type=cleaned['test_type'],
            test_value=cleaned['test_value'],
            test_unit=cleaned['test_unit'],
            result=cleaned['result'],
            recorded_by=operator,
            recorded_at=now,
        ))
        details = TestDetails(
            test_type=test.test_type,
            test_value=test.test_value,
            test_unit=test.test_unit,
            result=test.result,
        )
        return details, []

    def _apply_alert(self, operation, cleaned, operator, now, new_status):
        alert = self.store.add(Alert(
            operation=operation,
            issue_type=cleaned['issue_type'],
            severity=cleaned['severity'],
            description=cleaned['description'],
            raised_by=operator,
            created_at=now,
        ))
        details = AlertDetails(
            issue_type=alert.issue_type,
            severity=alert.severity,
            description=alert.description,
        )
        return details, []

    def _apply_contact(self, operation, cleaned, operator, now, new_status):
        contact = self.store.add(ContactRequest(
            operation=operation,
            issue_type=cleaned['issue_type'],
            message=cleaned['message'],
            requested_by=operator,
            created_at=now,
        ))
        details = ContactDetails(issue_type=contact.issue_type, message=contact.message)
        return details, []

    def _end_pause(self, operation, ended_at) -> int:
        """Close the open pause interval and add its minutes to the total."""
        record = self.store.close_downtime(operation, DowntimeRecord.KIND_PAUSE, ended_at)
        if record is not None:
            minutes = record.duration_minutes()
        elif operation.status == OperationStatus.PAUSED and operation.paused_at:
            minutes = max(0, int((ended_at - operation.paused_at).total_seconds() // 60))
        else:
            minutes = 0
        operation.total_pause_minutes = (operation.total_pause_minutes or 0) + minutes
        operation.pause_reason = None
        return minutes


def perform_action(action: str, operation_id, operator: str, data=None) -> ActionResult:
    """Convenience wrapper using the default ORM store."""
    return JobActionProcessor().perform(action, operation_id, operator, data)
