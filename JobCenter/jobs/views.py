"""JSON endpoints used by the operator tablets.

Every action posts to ``actions/<action>/`` with ``operation_id`` and the
action's fields, either as a JSON object or as form data.  Errors come
back as ``{"ok": false, "code", "message", "details"}`` with the status
code of the error class.
"""

from django.views.decorators.http import require_GET, require_POST

from users.utils import operator_identity
from utils.api import api_login_required, error_response, json_success, read_payload
from .exceptions import InvalidInput, JobActionError
from .models import NotificationTarget, status_label
from .queries import (
    get_current_status,
    get_operation_snapshot,
    recent_actions,
    recent_notifications,
)
from .services import JobActionProcessor


def _limit(request, default=None):
    raw = (request.GET.get('limit') or '').strip()
    if not raw:
        return default
    if not (raw.isascii() and raw.isdigit()) or int(raw) <= 0:
        raise InvalidInput('limit must be a positive whole number', details={'limit': 'invalid'})
    return min(int(raw), 200)


@require_POST
def action_view(request, action):
    """Run one operator action.  Identity comes from the session only."""
    try:
        payload = read_payload(request)
        operator = operator_identity(request.user)
        result = JobActionProcessor().perform(action, payload.get('operation_id'), operator, payload)
    except JobActionError as exc:
        return error_response(exc)
    return json_success(result.message, data=result.as_dict())


@require_GET
@api_login_required
def snapshot_view(request, operation_id):
    try:
        snapshot = get_operation_snapshot(operation_id)
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data=snapshot)


@require_GET
@api_login_required
def status_view(request, operation_id):
    """Lightweight polling endpoint: just the status code."""
    try:
        status = get_current_status(operation_id)
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data={
        'operation_id': int(operation_id),
        'status': status,
        'status_label': status_label(status),
    })


@require_GET
@api_login_required
def recent_actions_view(request):
    try:
        rows = recent_actions(_limit(request))
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data={'actions': rows})


@require_GET
@api_login_required
def notifications_view(request):
    """Newest notifications; ``?target=`` narrows to one audience code."""
    try:
        target = None
        raw_target = (request.GET.get('target') or '').strip()
        if raw_target:
            known = raw_target.isascii() and raw_target.isdigit()
            if not known or int(raw_target) not in NotificationTarget.values:
                raise InvalidInput('Unknown notification target', details={'target': 'invalid'})
            target = int(raw_target)
        rows = recent_notifications(target=target, limit=_limit(request))
    except JobActionError as exc:
        return error_response(exc)
    return json_success(data={'notifications': rows})
