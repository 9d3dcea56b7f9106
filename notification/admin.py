from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = (
        "notification_title",
        "notification_user",
        "notification_chama",
        "notification_type",
        "notification_priority",
        "notification_is_read",
        "notification_created_at",
    )
    list_filter = ("notification_type", "notification_priority", "notification_is_read")
    search_fields = ("notification_title", "notification_message", "notification_user__email")
    ordering = ("-notification_created_at",)
    readonly_fields = ("notification_created_at", "notification_updated_at")
