"""JSON endpoints for machine queues and supervisor sequencing."""

from datetime import date

from django.utils import timezone
from django.views.decorators.http import require_GET, require_POST

from jobs.exceptions import InvalidInput, JobActionError
from utils.api import api_login_required, error_response, json_success, read_payload, supervisor_required
from .models import Machine
from .services import (
    assign_sequence,
    build_shift_timeline,
    current_shift,
    get_machine,
    machine_queue,
    remove_from_sequence,
    shift_config,
)


def _parse_date(value) -> date:
    raw = str(value or '').strip()
    if not raw:
        return timezone.localdate()
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidInput('Date must be YYYY-MM-DD', details={'date': 'invalid'})


def _queue_args(source):
    machine = get_machine(source.get('machine'))
    planned_date = _parse_date(source.get('date'))
    shift = str(source.get('shift') or current_shift()).strip().upper()
    shift_config(shift)
    return machine, planned_date, shift


@require_GET
@api_login_required
def machines_view(request):
    machines = [
        {'code': m.code, 'name': m.name}
        for m in Machine.objects.filter(is_active=True).order_by('code')
    ]
    return json_success(data={'machines': machines})


@require_GET
@api_login_required
def current_shift_view(request):
    letter = current_shift()
    cfg = shift_config(letter)
    return json_success(data={'shift': letter, **cfg})


@require_GET
@api_login_required
def queue_view(request):
    """Queue and timeline for ``?machine=&date=&shift=`` (date/shift default to now)."""
    try:
        machine, planned_date, shift = _queue_args(request.GET)
        queue = [
            {'operation_id': op.pk, 'sequence': op.sequence, 'status': op.status,
             'lot_number': op.lot_number, 'item_code': op.item_code}
            for op in machine_queue(machine, planned_date, shift)
        ]
        timeline = build_shift_timeline(machine, planned_date, shift)
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data={
        'machine': machine.code,
        'date': planned_date.isoformat(),
        'shift': shift,
        'queue': queue,
        'timeline': timeline,
    })


@require_POST
@supervisor_required
def assign_sequence_view(request):
    try:
        payload = read_payload(request)
        machine, planned_date, shift = _queue_args(payload)
        operation_ids = payload.get('operation_ids')
        if not isinstance(operation_ids, list):
            raise InvalidInput('operation_ids must be a list', details={'operation_ids': 'invalid'})
        ordered = assign_sequence(machine, planned_date, shift, operation_ids)
    except JobActionError as exc:
        return error_response(exc)
    return json_success('Sequence updated', data={
        'machine': machine.code,
        'date': planned_date.isoformat(),
        'shift': shift,
        'sequence': [{'operation_id': op.pk, 'sequence': op.sequence} for op in ordered],
    })


@require_POST
@supervisor_required
def remove_from_sequence_view(request):
    try:
        payload = read_payload(request)
        op = remove_from_sequence(payload.get('operation_id'))
    except JobActionError as exc:
        return error_response(exc)
    return json_success('Removed from sequence', data={'operation_id': op.pk, 'sequence': op.sequence})
