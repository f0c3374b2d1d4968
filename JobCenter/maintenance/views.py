# JobCenter/maintenance/views.py
"""
Views for the maintenance app.

Maintenance technicians watch the open ticket list and close a ticket
once the machine is repaired.  Closing is limited to the maintenance,
supervisor and manager roles via ``utils.api.roles_required``.
"""

from django.views.decorators.http import require_GET, require_POST

from jobs.exceptions import InvalidInput, JobActionError
from users.utils import operator_identity
from utils.api import api_login_required, error_response, json_success, read_payload, roles_required
from .services import close_ticket, open_tickets, serialize_ticket


@require_GET
@api_login_required
def open_tickets_view(request):
    """List open tickets, oldest first."""
    tickets = [serialize_ticket(t) for t in open_tickets()]
    return json_success(data={'tickets': tickets, 'count': len(tickets)})


@require_POST
@roles_required('maintenance', 'supervisor', 'manager')
def close_ticket_view(request, ticket_id: int):
    try:
        payload = read_payload(request)
        resolution = str(payload.get('resolution') or '').strip()
        if len(resolution) > 255:
            raise InvalidInput(
                'Resolution must be 255 characters or less',
                details={'resolution': 'max_length'},
            )
        ticket = close_ticket(ticket_id, operator_identity(request.user), resolution)
    except JobActionError as exc:
        return error_response(exc)
    return json_success(f'Ticket {ticket.reference} closed', data=serialize_ticket(ticket))
