# PATH: /JobCenter/JobCenter/views.py
import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def health_view(request):
    """Liveness probe for the tablets and the load balancer; no login needed."""
    database = 'ok'
    try:
        connection.ensure_connection()
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        database = 'unavailable'
    healthy = database == 'ok'
    return JsonResponse(
        {
            'ok': healthy,
            'status': 'healthy' if healthy else 'degraded',
            'database': database,
            'server_time': timezone.localtime(timezone.now()).isoformat(),
        },
        status=200 if healthy else 503,
    )
