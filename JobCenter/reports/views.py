# PATH: /JobCenter/reports/views.py
from datetime import date

from django.utils import timezone
from django.views.decorators.http import require_GET

from jobs.exceptions import InvalidInput, JobActionError
from jobs.queries import parse_operation_id
from jobs.state_machine import ACTIONS
from utils.api import error_response, json_success, supervisor_required
from utils.xlsx import build_table_response
from .services import ACTION_LOG_HEADERS, action_log_queryset, action_log_rows, shift_summary


def _date_param(request, name, default=None):
    raw = (request.GET.get(name) or '').strip()
    if not raw:
        return default
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise InvalidInput(f'{name} must be YYYY-MM-DD', details={name: 'invalid'})


@require_GET
@supervisor_required
def action_log_export(request):
    """Download the action log as XLSX.

    Optional filters: ``date_from``, ``date_to`` (YYYY-MM-DD), ``action``
    and ``operation``.
    """
    try:
        date_from = _date_param(request, 'date_from')
        date_to = _date_param(request, 'date_to')
        action = (request.GET.get('action') or '').strip() or None
        if action and action not in ACTIONS:
            raise InvalidInput(f'Unknown action: {action}', details={'action': 'invalid'})
        raw_operation = (request.GET.get('operation') or '').strip()
        operation_id = parse_operation_id(raw_operation) if raw_operation else None
    except JobActionError as exc:
        return error_response(exc)

    records = action_log_queryset(date_from, date_to, action, operation_id)
    stamp = timezone.localdate().strftime('%Y%m%d')
    return build_table_response(
        sheet_title='Action log',
        report_title='Job Center action log',
        headers=ACTION_LOG_HEADERS,
        rows=action_log_rows(records),
        filename=f'action_log_{stamp}.xlsx',
        column_widths=[18, 11, 12, 14, 14, 11, 20, 13, 13, 60],
        table_name='ActionLog',
    )


@require_GET
@supervisor_required
def shift_summary_view(request):
    """Status counts and downtime per machine; dates default to today."""
    try:
        today = timezone.localdate()
        date_from = _date_param(request, 'date_from', today)
        date_to = _date_param(request, 'date_to', date_from)
        if date_to < date_from:
            raise InvalidInput('date_to must not be before date_from', details={'date_to': 'invalid'})
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data=shift_summary(date_from, date_to))
