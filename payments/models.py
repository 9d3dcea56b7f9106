from django.conf import settings
from django.db import models
from chama.models import Chama

TRANSACTION_STATUS_CHOICES = (
    ("pending", "Pending"),
    ("success", "Success"),
    ("failed", "Failed"),
)

TRANSACTION_TYPE_CHOICES = (
    ("paystack", "Paystack"),
    ("mpesa", "M-Pesa"),
)

TRANSACTION_PURPOSE_CHOICES = (
    ("wallet_topup", "Wallet Top-up"),
    ("other", "Other"),
    ("contribution", "Contribution"),
)

# Purposes whose successful payment lands in the user's wallet.
WALLET_CREDIT_PURPOSES = ("wallet_topup", "other")


class Transaction(models.Model):
    transaction_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        db_index=True,
        related_name="payment_transactions"
    )
    transaction_chama = models.ForeignKey(
        Chama,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payment_transactions"
    )
    transaction_reference = models.CharField(max_length=100, unique=True, db_index=True)
    transaction_type = models.CharField(
        max_length=20,
        choices=TRANSACTION_TYPE_CHOICES,
        default="paystack",
        db_index=True
    )
    transaction_purpose = models.CharField(
        max_length=20,
        choices=TRANSACTION_PURPOSE_CHOICES,
        default="wallet_topup"
    )
    transaction_amount = models.DecimalField(max_digits=12, decimal_places=2)
    transaction_phone_number = models.CharField(max_length=15, null=True, blank=True)
    transaction_status = models.CharField(
        max_length=20,
        choices=TRANSACTION_STATUS_CHOICES,
        default="pending",
        db_index=True
    )
    transaction_result_code = models.IntegerField(null=True, blank=True)
    transaction_result_desc = models.TextField(null=True, blank=True)
    transaction_receipt_number = models.CharField(max_length=100, null=True, blank=True)
    transaction_date = models.DateTimeField(null=True, blank=True)
    transaction_callback_data = models.JSONField(null=True, blank=True)
    transaction_metadata = models.JSONField(default=dict, blank=True)
    transaction_created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    transaction_updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "mpesa_transactions"
        indexes = [
            models.Index(fields=["transaction_user", "transaction_status"], name="mpesa_tx_user_status_idx"),
            models.Index(
                fields=["transaction_type", "transaction_status", "transaction_created_at"],
                name="mpesa_tx_stuck_lookup_idx",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_user} - {self.transaction_reference} - {self.transaction_status}"

    @property
    def credits_wallet(self):
        return self.transaction_purpose in WALLET_CREDIT_PURPOSES
