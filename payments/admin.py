from django.contrib import admin
from payments.models import Transaction

@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = (
        "transaction_reference",
        "transaction_user",
        "transaction_chama",
        "transaction_amount",
        "transaction_purpose",
        "transaction_type",
        "transaction_status",
        "transaction_created_at",
    )
    list_filter = (
        "transaction_status",
        "transaction_type",
        "transaction_purpose",
    )
    search_fields = (
        "transaction_reference",
        "transaction_user__email",
        "transaction_phone_number",
        "transaction_receipt_number",
    )
    readonly_fields = (
        "transaction_callback_data",
        "transaction_created_at",
        "transaction_updated_at",
    )
    ordering = ("-transaction_created_at",)

    fieldsets = (
        ("User & Chama", {
            "fields": ("transaction_user", "transaction_chama")
        }),
        ("Transaction Details", {
            "fields": (
                "transaction_reference",
                "transaction_amount",
                "transaction_phone_number",
                "transaction_type",
                "transaction_purpose",
                "transaction_status",
            )
        }),
        ("Processor Result", {
            "fields": (
                "transaction_result_code",
                "transaction_result_desc",
                "transaction_receipt_number",
                "transaction_date",
                "transaction_metadata",
                "transaction_callback_data",
            )
        }),
        ("Timestamps", {
            "fields": ("transaction_created_at", "transaction_updated_at")
        }),
    )
