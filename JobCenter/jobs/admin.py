"""
Admin configuration for the jobs app.

Operations are editable for planners; audit records and notifications
are append-only and shown read-only.
"""

from django.contrib import admin
from .models import ActionRecord, Alert, ContactRequest, Notification, Operation, QualityCheck, QualityTest


@admin.register(Operation)
class OperationAdmin(admin.ModelAdmin):
    list_display = ("id", "lot_number", "item_code", "machine", "planned_date", "shift", "sequence", "status", "hold_flag")
    search_fields = ("lot_number", "item_code", "machine__code")
    list_filter = ("status", "shift", "machine")


class ReadOnlyAdmin(admin.ModelAdmin):
    """Append-only records: viewable, never edited through the admin."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(ActionRecord)
class ActionRecordAdmin(ReadOnlyAdmin):
    list_display = ("performed_at", "operation", "action", "operator", "from_status", "to_status")
    list_filter = ("action",)
    search_fields = ("operator",)


@admin.register(Notification)
class NotificationAdmin(ReadOnlyAdmin):
    list_display = ("created_at", "message", "target", "category", "priority")
    list_filter = ("target", "category", "priority")


@admin.register(QualityCheck)
class QualityCheckAdmin(admin.ModelAdmin):
    list_display = ("operation", "kind", "revision", "actual_quantity", "qc_quantity", "requested_by", "requested_at")
    list_filter = ("kind",)


@admin.register(QualityTest)
class QualityTestAdmin(admin.ModelAdmin):
    list_display = ("operation", "test_type", "test_value", "test_unit", "result", "recorded_by", "recorded_at")
    list_filter = ("result", "test_type")


@admin.register(Alert)
class AlertAdmin(admin.ModelAdmin):
    list_display = ("operation", "issue_type", "severity", "status", "raised_by", "created_at")
    list_filter = ("severity", "status")


@admin.register(ContactRequest)
class ContactRequestAdmin(admin.ModelAdmin):
    list_display = ("operation", "issue_type", "status", "requested_by", "created_at")
    list_filter = ("issue_type", "status")
