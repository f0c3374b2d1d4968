# PATH: /JobCenter/users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        ('operator', 'Machine operator'),
        ('supervisor', 'Shift supervisor'),
        ('qc_inspector', 'QC inspector'),
        ('maintenance', 'Maintenance technician'),
        ('manager', 'Production manager'),
    ]

    SUPERVISOR_ROLES = frozenset({'supervisor', 'manager'})

    full_name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=30, choices=ROLE_CHOICES, default='operator')

    def __str__(self):
        return self.full_name or self.username

    @property
    def operator_name(self) -> str:
        """Identity string written into audit records."""
        return (self.full_name or '').strip() or self.username

    @property
    def is_supervisor(self) -> bool:
        return self.role in self.SUPERVISOR_ROLES or self.is_superuser

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
