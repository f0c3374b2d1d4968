"""
Configuration for the maintenance app.  Breakdowns reported from the
tablet open a ticket here, and every pause or breakdown leaves a
downtime interval that maintenance closes once the machine runs again.
"""

from django.apps import AppConfig


class MaintenanceConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'maintenance'
