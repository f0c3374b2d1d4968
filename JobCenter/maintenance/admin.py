from django.contrib import admin

from .models import DowntimeRecord, MaintenanceTicket


@admin.register(MaintenanceTicket)
class MaintenanceTicketAdmin(admin.ModelAdmin):
    list_display = ("id", "operation", "machine", "status", "opened_by", "opened_at", "closed_at")
    list_filter = ("status", "machine")
    search_fields = ("description", "opened_by")


@admin.register(DowntimeRecord)
class DowntimeRecordAdmin(admin.ModelAdmin):
    list_display = ("kind", "operation", "machine", "reason", "started_at", "ended_at", "recorded_by")
    list_filter = ("kind", "machine")
