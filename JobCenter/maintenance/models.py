from __future__ import annotations

from django.db import models
from django.utils import timezone


class MaintenanceTicket(models.Model):
    """Repair request opened when an operator reports a breakdown."""

    STATUS_OPEN = 'open'
    STATUS_CLOSED = 'closed'
    STATUS_CHOICES = [
        (STATUS_OPEN, 'Open'),
        (STATUS_CLOSED, 'Closed'),
    ]

    operation = models.ForeignKey('jobs.Operation', on_delete=models.CASCADE, related_name='maintenance_tickets')
    machine = models.ForeignKey(
        'planning.Machine', on_delete=models.SET_NULL, null=True, blank=True, related_name='maintenance_tickets'
    )
    description = models.CharField(max_length=200)
    opened_by = models.CharField(max_length=150)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)
    opened_at = models.DateTimeField(default=timezone.now)
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.CharField(max_length=150, blank=True)
    resolution = models.CharField(max_length=255, blank=True)

    def __str__(self) -> str:
        return f"{self.reference} ({self.get_status_display()})"

    @property
    def reference(self) -> str:
        return f"MT-{self.pk:06d}" if self.pk else ''

    @property
    def is_open(self) -> bool:
        return self.status == self.STATUS_OPEN

    class Meta:
        ordering = ['-opened_at', '-id']
        verbose_name = 'Maintenance ticket'
        verbose_name_plural = 'Maintenance tickets'


class DowntimeRecord(models.Model):
    """A machine-unavailability interval; open while ``ended_at`` is empty."""

    KIND_PAUSE = 'pause'
    KIND_BREAKDOWN = 'breakdown'
    KIND_CHOICES = [
        (KIND_PAUSE, 'Pause'),
        (KIND_BREAKDOWN, 'Breakdown'),
    ]

    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    reason = models.CharField(max_length=255, blank=True)
    operation = models.ForeignKey('jobs.Operation', on_delete=models.CASCADE, related_name='downtimes')
    machine = models.ForeignKey(
        'planning.Machine', on_delete=models.SET_NULL, null=True, blank=True, related_name='downtimes'
    )
    ticket = models.ForeignKey(
        MaintenanceTicket, on_delete=models.SET_NULL, null=True, blank=True, related_name='downtimes'
    )
    lot_number = models.CharField(max_length=50, blank=True)
    item_code = models.CharField(max_length=50, blank=True)
    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)
    recorded_by = models.CharField(max_length=150)

    def __str__(self) -> str:
        return f"{self.get_kind_display()} on {self.operation_id} from {self.started_at:%Y-%m-%d %H:%M}"

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    def duration_minutes(self, until=None) -> int:
        """Whole minutes between start and end (or ``until`` / now when open)."""
        end = self.ended_at or until or timezone.now()
        seconds = (end - self.started_at).total_seconds()
        return max(0, int(seconds // 60))

    class Meta:
        ordering = ['-started_at', '-id']
        indexes = [
            models.Index(fields=['operation', 'kind', 'ended_at'], name='maintenance_open_downtime_idx'),
        ]
        verbose_name = 'Downtime record'
        verbose_name_plural = 'Downtime records'
