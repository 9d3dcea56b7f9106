from django.contrib import admin
from wallet.models import Wallet, WalletTransaction, PlatformFee


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ("wallet_user", "wallet_balance", "wallet_currency", "wallet_updated_at")
    search_fields = ("wallet_user__email", "wallet_user__username")
    readonly_fields = ("wallet_created_at", "wallet_updated_at")


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = (
        "wallet_transaction_user",
        "wallet_transaction_type",
        "wallet_transaction_amount",
        "wallet_transaction_status",
        "wallet_transaction_reference",
        "wallet_transaction_payment_method",
        "wallet_transaction_created_at",
    )
    list_filter = ("wallet_transaction_type", "wallet_transaction_status", "wallet_transaction_payment_method")
    search_fields = ("wallet_transaction_reference", "wallet_transaction_user__email")
    ordering = ("-wallet_transaction_created_at",)
    readonly_fields = ("wallet_transaction_created_at",)


@admin.register(PlatformFee)
class PlatformFeeAdmin(admin.ModelAdmin):
    list_display = (
        "platform_fee_user",
        "platform_fee_type",
        "platform_fee_amount",
        "platform_fee_payment_reference",
        "platform_fee_created_at",
    )
    list_filter = ("platform_fee_type",)
    search_fields = ("platform_fee_payment_reference",)
    readonly_fields = ("platform_fee_created_at",)
