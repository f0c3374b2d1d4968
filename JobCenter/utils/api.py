"""Small helpers shared by the JSON endpoints of every app."""

from __future__ import annotations

import json
from functools import wraps

from django.http import JsonResponse

from jobs.exceptions import Forbidden, InvalidInput, JobActionError, Unauthorized
from users.utils import has_any_role, is_supervisor


def json_success(message: str = '', data: dict | None = None, status: int = 200) -> JsonResponse:
    body = {'ok': True, 'message': message, 'data': data if data is not None else {}}
    return JsonResponse(body, status=status)


def error_response(exc: JobActionError) -> JsonResponse:
    """Render any ``JobActionError`` as the JSON error body with its status."""
    return JsonResponse(exc.as_dict(), status=exc.status)


def read_payload(request) -> dict:
    """Return the request payload from a JSON body or from form data.

    Raises ``InvalidInput`` when a JSON body cannot be decoded or is not an
    object.
    """
    content_type = (request.content_type or '').lower()
    if content_type == 'application/json':
        raw = request.body or b''
        if not raw.strip():
            return {}
        try:
            payload = json.loads(raw.decode('utf-8'))
        except (UnicodeDecodeError, ValueError):
            raise InvalidInput('Request body is not valid JSON.')
        if not isinstance(payload, dict):
            raise InvalidInput('Request body must be a JSON object.')
        return payload
    source = request.POST if request.method == 'POST' else request.GET
    return {key: source.get(key) for key in source.keys()}


def api_login_required(view):
    """Like ``login_required`` but answers 401 JSON instead of redirecting."""

    @wraps(view)
    def wrapper(request, *args, **kwargs):
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return error_response(Unauthorized())
        return view(request, *args, **kwargs)

    return wrapper


def supervisor_required(view):
    """Reject callers that are not supervisors (or managers) with 403 JSON."""

    @wraps(view)
    @api_login_required
    def wrapper(request, *args, **kwargs):
        if not is_supervisor(request.user):
            return error_response(Forbidden('Supervisor access required.'))
        return view(request, *args, **kwargs)

    return wrapper


def roles_required(*roles):
    """Allow only users holding one of ``roles``; superusers always pass."""

    def decorator(view):
        @wraps(view)
        @api_login_required
        def wrapper(request, *args, **kwargs):
            if not has_any_role(request.user, roles):
                return error_response(Forbidden())
            return view(request, *args, **kwargs)

        return wrapper

    return decorator
