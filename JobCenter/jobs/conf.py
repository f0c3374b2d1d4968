"""Access to the ``JOB_CENTER`` settings dictionary with defaults."""

from django.conf import settings

DEFAULTS = {
    'RECENT_ACTIONS_LIMIT': 10,
    'NOTIFICATION_FEED_LIMIT': 50,
    'ALLOW_BREAKDOWN_WHILE_PAUSED': False,
    'SHIFTS': {
        'A': {'start': '06:00', 'end': '14:00', 'name': 'Morning'},
        'B': {'start': '14:00', 'end': '22:00', 'name': 'Afternoon'},
        'C': {'start': '22:00', 'end': '06:00', 'name': 'Night'},
    },
    'CHANGEOVER_MINUTES': 15,
    'DEFAULT_JOB_MINUTES': 50,
}


def job_center_setting(name: str):
    """Return ``settings.JOB_CENTER[name]`` falling back to the default."""
    configured = getattr(settings, 'JOB_CENTER', None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]
