"""Read-side queries for the tablet and the supervisor screens.

Nothing here writes.  Reads see either the state before or after an
in-flight action, never a half-written row, because every action commits
as one transaction.
"""

from __future__ import annotations

from typing import Optional

from .conf import job_center_setting
from .exceptions import InvalidOperationId, OperationNotFound
from .models import ActionRecord, Notification, Operation, status_color, status_label
from .state_machine import allowed_actions


def parse_operation_id(value) -> int:
    """Return ``value`` as a positive int or raise ``InvalidOperationId``."""
    if isinstance(value, bool) or value is None:
        raise InvalidOperationId()
    if isinstance(value, int):
        op_id = value
    else:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidOperationId()
        op_id = int(text)
    if op_id <= 0:
        raise InvalidOperationId()
    return op_id


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_action(record: ActionRecord) -> dict:
    return {
        'id': record.pk,
        'operation_id': record.operation_id,
        'action': record.action,
        'operator': record.operator,
        'performed_at': _iso(record.performed_at),
        'from_status': record.from_status,
        'to_status': record.to_status,
        'details': record.details,
    }


def serialize_notification(notification: Notification) -> dict:
    return {
        'id': notification.pk,
        'message': notification.message,
        'target': notification.target,
        'source_type': notification.source_type,
        'source_id': notification.source_id,
        'category': notification.category,
        'priority': notification.priority,
        'created_at': _iso(notification.created_at),
    }


def get_operation_snapshot(operation_id, limit: Optional[int] = None) -> dict:
    """Return the current state of an operation with its latest actions."""
    op_id = parse_operation_id(operation_id)
    operation = Operation.objects.select_related('machine').filter(pk=op_id).first()
    if operation is None:
        raise OperationNotFound(op_id)
    if limit is None:
        limit = job_center_setting('RECENT_ACTIONS_LIMIT')
    recent = operation.actions.order_by('-performed_at', '-id')[:limit]
    return {
        'operation_id': operation.pk,
        'status': operation.status,
        'status_label': status_label(operation.status),
        'status_color': status_color(operation.status),
        'hold_flag': operation.hold_flag,
        'planned_quantity': operation.planned_quantity,
        'actual_quantity': operation.actual_quantity,
        'reject_quantity': operation.reject_quantity,
        'progress_percent': operation.progress_percent,
        'completion_percent': operation.completion_percent,
        'machine': operation.machine.code if operation.machine else None,
        'lot_number': operation.lot_number,
        'item_code': operation.item_code,
        'planned_date': _iso(operation.planned_date),
        'shift': operation.shift,
        'sequence': operation.sequence,
        'message': operation.message,
        'remarks': operation.remarks,
        'started_at': _iso(operation.started_at),
        'ended_at': _iso(operation.ended_at),
        'paused_at': _iso(operation.paused_at),
        'resumed_at': _iso(operation.resumed_at),
        'breakdown_at': _iso(operation.breakdown_at),
        'qc_requested_at': _iso(operation.qc_requested_at),
        'total_pause_minutes': operation.total_pause_minutes,
        'is_paused': operation.is_paused,
        'is_qc_hold': operation.is_qc_hold,
        'is_completed': operation.is_completed,
        'allowed_actions': allowed_actions(
            operation.status,
            allow_breakdown_while_paused=bool(job_center_setting('ALLOW_BREAKDOWN_WHILE_PAUSED')),
        ),
        'recent_actions': [serialize_action(r) for r in recent],
    }


def get_current_status(operation_id) -> int:
    op_id = parse_operation_id(operation_id)
    status = Operation.objects.filter(pk=op_id).values_list('status', flat=True).first()
    if status is None:
        raise OperationNotFound(op_id)
    return status


def recent_actions(limit: Optional[int] = None) -> list:
    if limit is None:
        limit = job_center_setting('RECENT_ACTIONS_LIMIT')
    qs = ActionRecord.objects.order_by('-performed_at', '-id')[:limit]
    return [serialize_action(r) for r in qs]


def recent_notifications(target: Optional[int] = None, limit: Optional[int] = None) -> list:
    """Newest notifications, optionally only those for one audience."""
    if limit is None:
        limit = job_center_setting('NOTIFICATION_FEED_LIMIT')
    qs = Notification.objects.all()
    if target is not None:
        qs = qs.filter(target=target)
    return [serialize_notification(n) for n in qs.order_by('-created_at', '-id')[:limit]]
