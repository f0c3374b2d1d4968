# PATH: /JobCenter/users/views.py
from django.contrib.auth import logout
from django.views.decorators.http import require_GET, require_POST

from utils.api import json_success
from .utils import get_user_role, is_supervisor, operator_identity


@require_GET
def session_view(request):
    """Report the identity the tablet is logged in as.

    Anonymous callers get ``authenticated: false`` rather than an error so
    the login screen can poll this endpoint.
    """
    user = request.user
    if not user.is_authenticated:
        return json_success(data={'authenticated': False})
    return json_success(data={
        'authenticated': True,
        'username': user.get_username(),
        'operator': operator_identity(user),
        'role': get_user_role(user),
        'is_supervisor': is_supervisor(user),
    })


@require_POST
def logout_view(request):
    """End the session; safe to call when already logged out."""
    logout(request)
    return json_success('Logged out.', data={'authenticated': False})
