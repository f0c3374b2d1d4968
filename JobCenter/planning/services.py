"""Shift sequencing for supervisors.

A machine's queue for one date and shift is the set of its operations
with ``sequence > 0`` ordered by sequence.  Supervisors replace the whole
order at once; removing one job closes the gap behind it.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from django.db import transaction
from django.utils import timezone

from jobs.conf import job_center_setting
from jobs.exceptions import InvalidInput, NotFound, OperationNotFound, StatusConflict, ValidationFailed
from jobs.models import Operation, OperationStatus, status_label
from jobs.queries import parse_operation_id
from .models import Machine, ShiftChoices

logger = logging.getLogger(__name__)


def _parse_clock(value: str) -> time:
    hours, minutes = str(value).split(':')
    return time(int(hours), int(minutes))


def shift_config(shift: str) -> dict:
    shifts = job_center_setting('SHIFTS')
    try:
        return shifts[shift]
    except KeyError:
        raise InvalidInput(f'Unknown shift: {shift}', details={'shift': 'invalid'})


def current_shift(moment=None) -> str:
    """Return the shift letter covering ``moment`` (local time, default now)."""
    moment = moment or timezone.now()
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)
    clock = moment.time()
    for letter, cfg in job_center_setting('SHIFTS').items():
        start, end = _parse_clock(cfg['start']), _parse_clock(cfg['end'])
        if start <= end:
            if start <= clock < end:
                return letter
        elif clock >= start or clock < end:
            # crosses midnight
            return letter
    return ShiftChoices.A


def shift_window(planned_date, shift: str):
    """Aware ``(start, end)`` datetimes of ``shift`` on ``planned_date``."""
    cfg = shift_config(shift)
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(planned_date, _parse_clock(cfg['start'])), tz)
    end = timezone.make_aware(datetime.combine(planned_date, _parse_clock(cfg['end'])), tz)
    if end <= start:
        end += timedelta(days=1)
    return start, end


def get_machine(code: str) -> Machine:
    machine = Machine.objects.filter(code=(code or '').strip()).first()
    if machine is None:
        raise NotFound(f'Machine {code} not found.')
    return machine


def machine_queue(machine: Machine, planned_date, shift: str):
    return (
        Operation.objects.filter(machine=machine, planned_date=planned_date, shift=shift, sequence__gt=0)
        .order_by('sequence', 'id')
    )


def assign_sequence(machine: Machine, planned_date, shift: str, operation_ids) -> list:
    """Replace the queue of ``machine`` for the shift with ``operation_ids``.

    Operations already queued there but missing from the list drop to
    sequence 0.  Completed operations keep their sequence and may not be
    moved.
    """
    shift_config(shift)
    ids = [parse_operation_id(value) for value in operation_ids]
    if len(set(ids)) != len(ids):
        raise ValidationFailed('operation_ids', 'Each operation may appear only once')

    with transaction.atomic():
        operations = {
            op.pk: op for op in Operation.objects.select_for_update().filter(pk__in=ids)
        }
        for op_id in ids:
            op = operations.get(op_id)
            if op is None:
                raise OperationNotFound(op_id)
            if op.status == OperationStatus.COMPLETE:
                raise StatusConflict(status_label(op.status), 'Not complete')

        (
            Operation.objects.filter(machine=machine, planned_date=planned_date, shift=shift)
            .exclude(status=OperationStatus.COMPLETE)
            .exclude(pk__in=ids)
            .update(sequence=0)
        )
        ordered = []
        for position, op_id in enumerate(ids, start=1):
            op = operations[op_id]
            op.machine = machine
            op.planned_date = planned_date
            op.shift = shift
            op.sequence = position
            op.save(update_fields=['machine', 'planned_date', 'shift', 'sequence', 'updated_at'])
            ordered.append(op)

    logger.info("Sequenced %d operation(s) on %s for %s shift %s", len(ordered), machine.code, planned_date, shift)
    return ordered


def remove_from_sequence(operation_id) -> Operation:
    op_id = parse_operation_id(operation_id)
    with transaction.atomic():
        op = Operation.objects.select_for_update().filter(pk=op_id).first()
        if op is None:
            raise OperationNotFound(op_id)
        old_position = op.sequence
        if old_position:
            op.sequence = 0
            op.save(update_fields=['sequence', 'updated_at'])
            behind = (
                Operation.objects.select_for_update()
                .filter(
                    machine_id=op.machine_id,
                    planned_date=op.planned_date,
                    shift=op.shift,
                    sequence__gt=old_position,
                )
                .order_by('sequence')
            )
            for other in behind:
                other.sequence -= 1
                other.save(update_fields=['sequence', 'updated_at'])
    logger.info("Removed operation %s from sequence position %s", op_id, old_position)
    return op


def build_shift_timeline(machine: Machine, planned_date, shift: str) -> list:
    """Lay the queue out back to back from the shift start.

    Each job takes its ``estimated_minutes`` (or the default) followed by
    the changeover gap before the next one.
    """
    shift_start, shift_end = shift_window(planned_date, shift)
    changeover = timedelta(minutes=int(job_center_setting('CHANGEOVER_MINUTES')))
    default_minutes = int(job_center_setting('DEFAULT_JOB_MINUTES'))

    cursor = shift_start
    timeline = []
    for op in machine_queue(machine, planned_date, shift):
        minutes = op.estimated_minutes or default_minutes
        start = cursor
        end = start + timedelta(minutes=minutes)
        timeline.append({
            'operation_id': op.pk,
            'sequence': op.sequence,
            'lot_number': op.lot_number,
            'item_code': op.item_code,
            'status': op.status,
            'status_label': status_label(op.status),
            'start': start.isoformat(),
            'end': end.isoformat(),
            'minutes': minutes,
            'overruns_shift': end > shift_end,
        })
        cursor = end + changeover
    return timeline
