"""Maintenance ticket handling."""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from jobs.exceptions import NotFound, StatusConflict
from .models import DowntimeRecord, MaintenanceTicket

logger = logging.getLogger(__name__)


def open_tickets():
    return (
        MaintenanceTicket.objects.filter(status=MaintenanceTicket.STATUS_OPEN)
        .select_related('operation', 'machine')
        .order_by('opened_at', 'id')
    )


def close_ticket(ticket_id: int, closed_by: str, resolution: str = '', closed_at=None) -> MaintenanceTicket:
    """Close a ticket and end the breakdown downtime it opened.

    The operation's status is left alone: the operator resumes the job
    from the tablet once the machine runs again.
    """
    closed_at = closed_at or timezone.now()
    with transaction.atomic():
        ticket = MaintenanceTicket.objects.select_for_update().filter(pk=ticket_id).first()
        if ticket is None:
            raise NotFound(f'Maintenance ticket {ticket_id} not found.')
        if not ticket.is_open:
            raise StatusConflict('Closed', 'Open')
        ticket.status = MaintenanceTicket.STATUS_CLOSED
        ticket.closed_at = closed_at
        ticket.closed_by = closed_by
        ticket.resolution = resolution
        ticket.save(update_fields=['status', 'closed_at', 'closed_by', 'resolution'])

        # Only the interval this ticket opened
        downtimes = DowntimeRecord.objects.filter(
            ticket=ticket,
            kind=DowntimeRecord.KIND_BREAKDOWN,
            ended_at__isnull=True,
        )
        ended = downtimes.update(ended_at=closed_at)

    logger.info("Closed %s by %r; ended %d breakdown interval(s)", ticket.reference, closed_by, ended)
    return ticket


def serialize_ticket(ticket: MaintenanceTicket) -> dict:
    return {
        'id': ticket.pk,
        'reference': ticket.reference,
        'operation_id': ticket.operation_id,
        'machine': ticket.machine.code if ticket.machine else None,
        'description': ticket.description,
        'status': ticket.status,
        'opened_by': ticket.opened_by,
        'opened_at': ticket.opened_at.isoformat() if ticket.opened_at else None,
        'closed_by': ticket.closed_by,
        'closed_at': ticket.closed_at.isoformat() if ticket.closed_at else None,
        'resolution': ticket.resolution,
    }
