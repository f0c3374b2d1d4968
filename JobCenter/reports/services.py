"""Aggregations behind the supervisor reports."""

from __future__ import annotations

import json
from collections import defaultdict

from django.db.models import Count

from jobs.models import ActionRecord, Operation, OperationStatus, status_label
from maintenance.models import DowntimeRecord

ACTION_LOG_HEADERS = [
    'Performed at', 'Operation', 'Machine', 'Lot', 'Item',
    'Action', 'Operator', 'From', 'To', 'Details',
]


def action_log_queryset(date_from=None, date_to=None, action=None, operation_id=None):
    qs = ActionRecord.objects.select_related('operation', 'operation__machine').order_by('-performed_at', '-id')
    if date_from:
        qs = qs.filter(performed_at__date__gte=date_from)
    if date_to:
        qs = qs.filter(performed_at__date__lte=date_to)
    if action:
        qs = qs.filter(action=action)
    if operation_id:
        qs = qs.filter(operation_id=operation_id)
    return qs


def action_log_rows(records):
    for record in records:
        operation = record.operation
        machine = operation.machine.code if operation.machine else ''
        yield [
            record.performed_at,
            record.operation_id,
            machine,
            operation.lot_number,
            operation.item_code,
            record.action,
            record.operator,
            status_label(record.from_status),
            status_label(record.to_status),
            json.dumps(record.details, ensure_ascii=False, sort_keys=True),
        ]


def shift_summary(date_from, date_to) -> dict:
    """Operation counts per status and closed downtime minutes per machine.

    Operations are selected by planned date; downtime by the local date
    it started on.  Open intervals are not counted.
    """
    counted = {
        row['status']: row['count']
        for row in Operation.objects.filter(planned_date__range=(date_from, date_to))
        .values('status').annotate(count=Count('id'))
    }
    statuses = [
        {'status': s.value, 'label': s.label, 'count': counted.get(s.value, 0)}
        for s in OperationStatus
    ]

    minutes = defaultdict(lambda: {DowntimeRecord.KIND_PAUSE: 0, DowntimeRecord.KIND_BREAKDOWN: 0})
    closed = (
        DowntimeRecord.objects.select_related('machine')
        .filter(ended_at__isnull=False, started_at__date__range=(date_from, date_to))
    )
    for record in closed:
        key = record.machine.code if record.machine else ''
        minutes[key][record.kind] += record.duration_minutes()
    downtime = [
        {
            'machine': code or None,
            'pause_minutes': kinds[DowntimeRecord.KIND_PAUSE],
            'breakdown_minutes': kinds[DowntimeRecord.KIND_BREAKDOWN],
            'total_minutes': sum(kinds.values()),
        }
        for code, kinds in sorted(minutes.items())
    ]

    return {
        'date_from': date_from.isoformat(),
        'date_to': date_to.isoformat(),
        'total_operations': sum(counted.values()),
        'statuses': statuses,
        'downtime': downtime,
    }
