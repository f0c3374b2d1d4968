from django.apps import AppConfig


class JobsConfig(AppConfig):
    """Configuration for the jobs app.

    The jobs app owns operations, the status state machine that operators
    drive from the tablet, and the audit and notification trail each
    action leaves behind.
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'jobs'
