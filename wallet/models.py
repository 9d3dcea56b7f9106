from django.conf import settings
from django.db import models

WALLET_TRANSACTION_TYPE_CHOICES = (
    ("deposit", "Deposit"),
    ("withdrawal", "Withdrawal"),
    ("fee", "Fee"),
)

WALLET_TRANSACTION_STATUS_CHOICES = (
    ("pending", "Pending"),
    ("completed", "Completed"),
    ("failed", "Failed"),
)


class Wallet(models.Model):
    wallet_user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="wallet"
    )
    wallet_balance = models.DecimalField(max_digits=18, decimal_places=6, default=0)
    wallet_currency = models.CharField(max_length=3, default="KES")
    wallet_created_at = models.DateTimeField(auto_now_add=True)
    wallet_updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.wallet_user} - {self.wallet_currency} {self.wallet_balance}"


class WalletTransaction(models.Model):
    wallet_transaction_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        db_index=True,
        related_name="wallet_transactions"
    )
    wallet_transaction_type = models.CharField(max_length=20, choices=WALLET_TRANSACTION_TYPE_CHOICES)
    wallet_transaction_amount = models.DecimalField(max_digits=18, decimal_places=6)
    wallet_transaction_description = models.CharField(max_length=255, blank=True)
    wallet_transaction_status = models.CharField(
        max_length=20,
        choices=WALLET_TRANSACTION_STATUS_CHOICES,
        default="completed"
    )
    # Not unique: the same reference can be credited more than once.
    wallet_transaction_reference = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    wallet_transaction_payment_method = models.CharField(max_length=30, blank=True, null=True)
    wallet_transaction_currency = models.CharField(max_length=3, default="KES")
    wallet_transaction_created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-wallet_transaction_created_at"]

    def __str__(self):
        return f"{self.wallet_transaction_user} - {self.wallet_transaction_type} - {self.wallet_transaction_amount}"


class PlatformFee(models.Model):
    platform_fee_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="platform_fees"
    )
    platform_fee_type = models.CharField(max_length=20, default="transaction")
    platform_fee_amount = models.DecimalField(max_digits=18, decimal_places=6)
    platform_fee_source_transaction_id = models.CharField(max_length=100, blank=True, null=True)
    platform_fee_payment_reference = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    platform_fee_created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.platform_fee_type} fee {self.platform_fee_amount} ({self.platform_fee_payment_reference})"
