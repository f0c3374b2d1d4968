"""Models for the jobs app.

An ``Operation`` is one job on one machine.  Its ``status`` only ever
changes through the actions in ``jobs.services``; every successful action
appends an ``ActionRecord`` and usually a ``Notification``.  The quality
records (checks, tests) and the floor signals (alerts, help requests)
hang off the operation they were raised against.
"""

from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from planning.models import ShiftChoices


class OperationStatus(models.IntegerChoices):
    NEW = 1, 'New'
    ASSIGNED = 2, 'Assigned'
    SETUP = 3, 'Setup'
    FPQC = 4, 'FPQC'
    IN_PROCESS = 5, 'In Process'
    PAUSED = 6, 'Paused'
    BREAKDOWN = 7, 'Breakdown'
    ON_HOLD = 8, 'On Hold'
    LPQC = 9, 'LPQC'
    COMPLETE = 10, 'Complete'
    # 11 is reserved and never assigned
    QC_HOLD = 12, 'QC Hold'
    QC_CHECK = 13, 'QC Check'


STATUS_COLORS = {
    OperationStatus.NEW: '#6b7280',
    OperationStatus.ASSIGNED: '#8b5cf6',
    OperationStatus.SETUP: '#3b82f6',
    OperationStatus.FPQC: '#f59e0b',
    OperationStatus.IN_PROCESS: '#10b981',
    OperationStatus.PAUSED: '#f97316',
    OperationStatus.BREAKDOWN: '#ef4444',
    OperationStatus.ON_HOLD: '#ef4444',
    OperationStatus.LPQC: '#a855f7',
    OperationStatus.COMPLETE: '#16a34a',
    OperationStatus.QC_HOLD: '#dc2626',
    OperationStatus.QC_CHECK: '#7c3aed',
}


def status_label(value) -> str:
    """Return the display name for a status code, tolerating unknown codes."""
    if value in (None, ''):
        return ''
    try:
        return OperationStatus(int(value)).label
    except (TypeError, ValueError):
        return f'Unknown ({value})'


def status_color(value) -> str:
    try:
        return STATUS_COLORS[OperationStatus(int(value))]
    except (TypeError, ValueError, KeyError):
        return '#6b7280'


class PauseReason(models.IntegerChoices):
    BREAK = 1, 'Break'
    MATERIAL_SHORTAGE = 2, 'Material shortage'
    TOOL_CHANGE = 3, 'Tool change'
    QUALITY_ISSUE = 4, 'Quality issue'
    OTHER = 5, 'Other'


class NotificationTarget(models.IntegerChoices):
    ALL = 0, 'All'
    SUPERVISORS = 1, 'Supervisors'
    QC = 2, 'QC'
    MAINTENANCE = 3, 'Maintenance'


class NotificationPriority(models.IntegerChoices):
    NORMAL = 0, 'Normal'
    CRITICAL = 1, 'Critical'
    HIGH = 2, 'High'


class Operation(models.Model):
    machine = models.ForeignKey(
        'planning.Machine', on_delete=models.SET_NULL, null=True, blank=True, related_name='operations'
    )
    lot_number = models.CharField(max_length=50, blank=True)
    item_code = models.CharField(max_length=50, blank=True)

    # Planning
    planned_date = models.DateField(null=True, blank=True)
    shift = models.CharField(max_length=1, choices=ShiftChoices.choices, blank=True)
    sequence = models.PositiveIntegerField(default=0)
    estimated_minutes = models.PositiveIntegerField(null=True, blank=True)

    # State
    status = models.PositiveSmallIntegerField(choices=OperationStatus.choices, default=OperationStatus.NEW)
    hold_flag = models.PositiveSmallIntegerField(choices=OperationStatus.choices, null=True, blank=True)
    pause_reason = models.PositiveSmallIntegerField(choices=PauseReason.choices, null=True, blank=True)

    # Quantities
    planned_quantity = models.PositiveIntegerField(default=0)
    actual_quantity = models.PositiveIntegerField(default=0)
    reject_quantity = models.PositiveIntegerField(default=0)
    completion_percent = models.FloatField(null=True, blank=True)

    message = models.CharField(max_length=100, blank=True)
    remarks = models.CharField(max_length=255, blank=True)

    # Each timestamp is written only by its own action
    started_at = models.DateTimeField(null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)
    paused_at = models.DateTimeField(null=True, blank=True)
    resumed_at = models.DateTimeField(null=True, blank=True)
    breakdown_at = models.DateTimeField(null=True, blank=True)
    qc_requested_at = models.DateTimeField(null=True, blank=True)
    total_pause_minutes = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        label = self.lot_number or self.item_code or f'#{self.pk}'
        return f"Operation {label} ({status_label(self.status)})"

    @property
    def status_label(self) -> str:
        return status_label(self.status)

    @property
    def is_paused(self) -> bool:
        return self.status == OperationStatus.PAUSED

    @property
    def is_qc_hold(self) -> bool:
        return self.status in (OperationStatus.QC_HOLD, OperationStatus.QC_CHECK)

    @property
    def is_completed(self) -> bool:
        return self.status == OperationStatus.COMPLETE

    @property
    def progress_percent(self) -> float:
        """Progress for display, capped at 100."""
        if not self.planned_quantity:
            return 0
        return round(min(100.0, self.actual_quantity / self.planned_quantity * 100), 2)

    class Meta:
        ordering = ['machine_id', 'planned_date', 'shift', 'sequence', 'id']
        indexes = [
            models.Index(fields=['machine', 'planned_date', 'shift', 'sequence'], name='jobs_operation_queue_idx'),
            models.Index(fields=['status'], name='jobs_operation_status_idx'),
        ]
        verbose_name = 'Operation'
        verbose_name_plural = 'Operations'


class ActionRecord(models.Model):
    """Append-only audit entry written by every successful action."""

    operation = models.ForeignKey(Operation, on_delete=models.CASCADE, related_name='actions')
    action = models.CharField(max_length=20)
    operator = models.CharField(max_length=150)
    performed_at = models.DateTimeField(default=timezone.now, db_index=True)
    from_status = models.PositiveSmallIntegerField(choices=OperationStatus.choices)
    to_status = models.PositiveSmallIntegerField(choices=OperationStatus.choices)
    details = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    def __str__(self) -> str:
        return f"{self.action} on {self.operation_id} by {self.operator}"

    class Meta:
        ordering = ['-performed_at', '-id']
        verbose_name = 'Action record'
        verbose_name_plural = 'Action records'


class Notification(models.Model):
    message = models.TextField()
    target = models.PositiveSmallIntegerField(choices=NotificationTarget.choices, default=NotificationTarget.ALL)
    source_type = models.CharField(max_length=30, default='operations')
    source_id = models.PositiveBigIntegerField()
    category = models.CharField(max_length=30)
    priority = models.PositiveSmallIntegerField(
        choices=NotificationPriority.choices, default=NotificationPriority.NORMAL
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self) -> str:
        return self.message

    class Meta:
        ordering = ['-created_at', '-id']


class QualityCheck(models.Model):
    KIND_CHOICES = [
        ('fpqc', 'First piece QC'),
        ('qc_check', 'QC check request'),
    ]

    operation = models.ForeignKey(Operation, on_delete=models.CASCADE, related_name='quality_checks')
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    revision = models.PositiveIntegerField(default=1)
    actual_quantity = models.PositiveIntegerField(null=True, blank=True)
    qc_quantity = models.PositiveIntegerField(null=True, blank=True)
    reject_quantity = models.PositiveIntegerField(null=True, blank=True)
    nc_quantity = models.PositiveIntegerField(null=True, blank=True)
    message = models.CharField(max_length=100, blank=True)
    reason = models.CharField(max_length=255, blank=True)
    remarks = models.CharField(max_length=255, blank=True)
    requested_by = models.CharField(max_length=150)
    requested_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['operation_id', 'kind', 'revision']
        constraints = [
            models.UniqueConstraint(fields=['operation', 'kind', 'revision'], name='unique_quality_check_revision'),
        ]


class QualityTest(models.Model):
    TEST_TYPE_CHOICES = [
        ('dimensional', 'Dimensional'),
        ('surface_finish', 'Surface finish'),
        ('hardness', 'Hardness'),
        ('visual', 'Visual'),
        ('functional', 'Functional'),
        ('torque', 'Torque'),
        ('pressure', 'Pressure'),
        ('temperature', 'Temperature'),
        ('other', 'Other'),
    ]
    UNIT_CHOICES = [
        (unit, unit)
        for unit in ('mm', 'in', 'um', 'mil', 'kg', 'lb', 'N', 'Nm', 'psi', 'bar', 'C', 'F', 'HRC', 'HRB', 'Ra', 'count')
    ]
    RESULT_CHOICES = [('pass', 'Pass'), ('fail', 'Fail')]

    operation = models.ForeignKey(Operation, on_delete=models.CASCADE, related_name='quality_tests')
    test_type = models.CharField(max_length=20, choices=TEST_TYPE_CHOICES)
    test_value = models.DecimalField(max_digits=12, decimal_places=4)
    test_unit = models.CharField(max_length=10, choices=UNIT_CHOICES)
    result = models.CharField(max_length=4, choices=RESULT_CHOICES)
    recorded_by = models.CharField(max_length=150)
    recorded_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-recorded_at', '-id']


class Alert(models.Model):
    SEVERITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
        ('critical', 'Critical'),
    ]
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('acknowledged', 'Acknowledged'),
        ('resolved', 'Resolved'),
    ]

    operation = models.ForeignKey(Operation, on_delete=models.CASCADE, related_name='alerts')
    issue_type = models.CharField(max_length=50)
    severity = models.CharField(max_length=10, choices=SEVERITY_CHOICES)
    description = models.TextField(max_length=500)
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default='open')
    raised_by = models.CharField(max_length=150)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at', '-id']


class ContactRequest(models.Model):
    ISSUE_TYPE_CHOICES = [
        ('production', 'Production'),
        ('quality', 'Quality'),
        ('material', 'Material'),
        ('technical', 'Technical'),
        ('emergency', 'Emergency'),
        ('other', 'Other'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('answered', 'Answered'),
    ]

    operation = models.ForeignKey(Operation, on_delete=models.CASCADE, related_name='contact_requests')
    issue_type = models.CharField(max_length=20, choices=ISSUE_TYPE_CHOICES)
    message = models.TextField(max_length=500)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    requested_by = models.CharField(max_length=150)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created_at', '-id']
