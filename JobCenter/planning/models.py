from django.db import models


class ShiftChoices(models.TextChoices):
    A = 'A', 'Shift A'
    B = 'B', 'Shift B'
    C = 'C', 'Shift C'


class Machine(models.Model):
    """A machine on the shop floor that operations are sequenced onto."""

    code = models.CharField(max_length=30, unique=True)
    name = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)

    def __str__(self) -> str:
        return f"{self.code} - {self.name}" if self.name else self.code

    class Meta:
        ordering = ['code']
        verbose_name = 'Machine'
        verbose_name_plural = 'Machines'
