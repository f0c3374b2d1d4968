"""Role helpers shared by the API views of every app."""

from typing import Optional

KNOWN_ROLES = {'operator', 'supervisor', 'qc_inspector', 'maintenance', 'manager'}


def get_user_role(user) -> Optional[str]:
    """Return the canonical role slug of ``user`` or ``None``."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return None
    role = str(getattr(user, 'role', '') or '').strip().lower()
    return role if role in KNOWN_ROLES else None


def operator_identity(user) -> str:
    """Return the identity string recorded against actions, or ``''``."""
    if user is None or not getattr(user, 'is_authenticated', False):
        return ''
    return getattr(user, 'operator_name', '') or user.get_username()


def is_supervisor(user) -> bool:
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    return bool(getattr(user, 'is_supervisor', False))


def has_any_role(user, roles) -> bool:
    if user is None or not getattr(user, 'is_authenticated', False):
        return False
    if getattr(user, 'is_superuser', False):
        return True
    return get_user_role(user) in set(roles)
