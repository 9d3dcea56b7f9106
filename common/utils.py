import logging

from django.core.cache import cache
from django.core.paginator import Paginator
from django.db import transaction
from notification.models import Notification

logger = logging.getLogger(__name__)

WALLET_CACHE_PREFIX = "user-wallets"
STUCK_PAYMENTS_CACHE_PREFIX = "stuck-payments"

# -------------------------
# Generic helpers
# -------------------------

def paginate_queryset(queryset, page_number, per_page=20):
    """Reusable pagination helper."""
    paginator = Paginator(queryset, per_page)
    return paginator.get_page(page_number)


def wallet_cache_key(user_id):
    return f"{WALLET_CACHE_PREFIX}:{user_id}"


def stuck_payments_cache_key(user_id):
    return f"{STUCK_PAYMENTS_CACHE_PREFIX}:{user_id}"


def invalidate_wallet_views(user_id):
    """Drop cached wallet and stuck-payment views so the next read refetches."""
    cache.delete_many([wallet_cache_key(user_id), stuck_payments_cache_key(user_id)])

# -------------------------
# Notification helpers
# -------------------------

def notify_user(user, title, message, n_type, chama=None, data=None, priority="normal", sender=None):
    """
    Create a single Notification. Fire-and-forget: failures are logged and
    ``None`` is returned instead of raising.
    """
    try:
        with transaction.atomic():
            return Notification.objects.create(
                notification_user=user,
                notification_chama=chama,
                notification_title=title,
                notification_message=message,
                notification_type=n_type,
                notification_priority=priority,
                notification_data=data or {},
                notification_sender=sender,
            )
    except Exception:
        logger.exception(f"Failed to create {n_type} notification for user {getattr(user, 'pk', user)}")
        return None


def send_chama_notification(
    chama,
    recipients,
    title,
    message,
    sender=None,
    n_type="announcement",
    priority="normal",
    data=None,
):
    """
    Create Notification records for a list of users.

    Args:
        chama: Chama instance (may be None for wallet-level messages)
        recipients: iterable of User objects
        title: notification title
        message: notification message
        sender: User instance (optional)
        n_type: notification type (e.g., 'announcement', 'join_request', 'payment_success')
        priority: 'low', 'normal' or 'high'
        data: optional JSON-serialisable payload
    """
    created_notifications = []
    for user in recipients:
        notif = notify_user(
            user, title, message, n_type,
            chama=chama, data=data, priority=priority, sender=sender,
        )
        if notif:
            created_notifications.append(notif)
    return created_notifications
