"""Persistence for job actions.

``OperationStore`` is the only place the action processor touches the
database.  The processor receives a store instance, so tests can swap in
a subclass that fails on purpose.
"""

from __future__ import annotations

from typing import Optional

from django.db import transaction
from django.db.models import Max

from maintenance.models import DowntimeRecord, MaintenanceTicket
from .models import ActionRecord, Notification, Operation, QualityCheck


class OperationStore:

    def atomic(self):
        return transaction.atomic()

    def lock_operation(self, operation_id: int) -> Optional[Operation]:
        """Fetch the operation row with a row lock held until commit."""
        return Operation.objects.select_for_update().filter(pk=operation_id).first()

    def save_operation(self, operation: Operation, fields) -> None:
        operation.save(update_fields=sorted(set(fields) | {'updated_at'}))

    def add(self, obj):
        obj.save()
        return obj

    def append_action(self, operation, action, operator, performed_at, from_status, to_status, details) -> ActionRecord:
        return ActionRecord.objects.create(
            operation=operation,
            action=action,
            operator=operator,
            performed_at=performed_at,
            from_status=from_status,
            to_status=to_status,
            details=details,
        )

    def publish(self, operation_id, message, target, category, priority=0, created_at=None) -> Notification:
        kwargs = {}
        if created_at is not None:
            kwargs['created_at'] = created_at
        return Notification.objects.create(
            message=message,
            target=target,
            source_type='operations',
            source_id=operation_id,
            category=category,
            priority=priority,
            **kwargs,
        )

    def next_revision(self, operation, kind) -> int:
        latest = (
            QualityCheck.objects.filter(operation=operation, kind=kind)
            .aggregate(latest=Max('revision'))['latest']
        )
        return (latest or 0) + 1

    def open_ticket(self, operation, description, opened_by, opened_at) -> MaintenanceTicket:
        return self.add(MaintenanceTicket(
            operation=operation,
            machine_id=operation.machine_id,
            description=description,
            opened_by=opened_by,
            opened_at=opened_at,
        ))

    def open_downtime(self, operation, kind, reason, started_at, recorded_by, ticket=None) -> DowntimeRecord:
        return self.add(DowntimeRecord(
            kind=kind,
            reason=reason,
            operation=operation,
            machine_id=operation.machine_id,
            ticket=ticket,
            lot_number=operation.lot_number,
            item_code=operation.item_code,
            started_at=started_at,
            recorded_by=recorded_by,
        ))

    def close_downtime(self, operation, kind, ended_at) -> Optional[DowntimeRecord]:
        """End the newest open downtime of ``kind``; ``None`` when none is open."""
        record = (
            DowntimeRecord.objects.select_for_update()
            .filter(operation=operation, kind=kind, ended_at__isnull=True)
            .order_by('-started_at', '-id')
            .first()
        )
        if record is None:
            return None
        record.ended_at = max(ended_at, record.started_at)
        record.save(update_fields=['ended_at'])
        return record
