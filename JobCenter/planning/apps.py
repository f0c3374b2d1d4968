from django.apps import AppConfig


class PlanningConfig(AppConfig):
    """Machines, shifts and the per-shift job sequence set by supervisors."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'planning'
