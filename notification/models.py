from django.conf import settings
from django.db import models
from chama.models import Chama


class Notification(models.Model):
    NOTIFICATION_TYPE = [
        ('announcement', 'Announcement'),
        ('payment_success', 'Payment Successful'),
        ('payment_failed', 'Payment Failed'),
        ('join_request', 'Join Request'),
        ('member_joined', 'Member Joined'),
        ('transaction', 'Transaction'),
    ]

    PRIORITY_LEVELS = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
    ]

    notification_user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications"
    )
    notification_chama = models.ForeignKey(Chama, on_delete=models.CASCADE, null=True, blank=True)
    notification_title = models.CharField(max_length=100, blank=True, null=True)
    notification_message = models.TextField()
    notification_type = models.CharField(max_length=30, choices=NOTIFICATION_TYPE)
    notification_priority = models.CharField(max_length=10, choices=PRIORITY_LEVELS, default='normal')
    notification_data = models.JSONField(default=dict, blank=True)
    notification_sender = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="sent_notifications"
    )
    notification_is_read = models.BooleanField(default=False)
    notification_created_at = models.DateTimeField(auto_now_add=True)
    notification_updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-notification_created_at"]

    def __str__(self):
        return f"{self.notification_type} - {self.notification_user}"
