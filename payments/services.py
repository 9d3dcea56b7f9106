import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from payments.exceptions import PaymentError, TransactionNotFound
from payments.models import Transaction
from wallet.services import (
    credit_wallet,
    get_or_create_wallet,
    has_been_credited,
    record_wallet_transaction,
    split_platform_fee,
    to_money,
)

logger = logging.getLogger(__name__)


def get_transaction(reference):
    tx = Transaction.objects.select_related("transaction_user", "transaction_chama").filter(
        transaction_reference=reference
    ).first()
    if tx is None:
        raise TransactionNotFound(reference)
    return tx


def mark_transaction_success(reference, result_desc, paid_at=None, callback_data=None):
    """Unconditional status update by reference; returns the number of rows touched."""
    fields = {
        "transaction_status": "success",
        "transaction_result_code": 0,
        "transaction_result_desc": result_desc,
        "transaction_receipt_number": reference,
        "transaction_date": paid_at or timezone.now(),
        "transaction_updated_at": timezone.now(),
    }
    if callback_data is not None:
        fields["transaction_callback_data"] = callback_data
    return Transaction.objects.filter(transaction_reference=reference).update(**fields)


def mark_transaction_failed(reference, result_desc, callback_data=None):
    return Transaction.objects.filter(transaction_reference=reference).update(
        transaction_status="failed",
        transaction_result_code=1,
        transaction_result_desc=result_desc,
        transaction_callback_data=callback_data,
        transaction_updated_at=timezone.now(),
    )


def manual_credit_payment(reference):
    """
    Credit the wallet for a stored transaction, trusting its stored amount.

    Raises on lookup miss or when the wallet cannot be credited. The ledger
    entry and the status update are best-effort. There is no check for an
    earlier credit of the same reference unless PAYMENTS_IDEMPOTENT_CREDIT
    is enabled, so calling this twice credits twice.
    """
    logger.info(f"Manually crediting payment for reference: {reference}")
    if not reference:
        raise TransactionNotFound(reference)

    tx = get_transaction(reference)
    user = tx.transaction_user
    if user is None:
        raise PaymentError("Transaction has no owner")

    if settings.PAYMENTS_IDEMPOTENT_CREDIT and has_been_credited(reference):
        wallet = get_or_create_wallet(user)
        logger.info(f"Reference {reference} already credited, skipping")
        return {
            "success": True,
            "message": "Payment already credited",
            "amount": 0.0,
            "newBalance": float(wallet.wallet_balance),
        }

    platform_fee, net_amount = split_platform_fee(tx.transaction_amount)
    wallet, previous_balance = credit_wallet(user, net_amount)

    try:
        with transaction.atomic():
            record_wallet_transaction(
                user,
                net_amount,
                f"Wallet top-up via Paystack (Fee: KES {to_money(platform_fee)})",
                reference,
                "paystack",
            )
    except Exception:
        logger.exception(f"Error recording wallet transaction for {reference}")

    try:
        with transaction.atomic():
            mark_transaction_success(reference, "Payment verified and credited manually")
    except Exception:
        logger.exception(f"Error updating transaction status for {reference}")

    logger.info(
        f"Payment credited successfully: user={user.pk} net={net_amount} "
        f"previous={previous_balance} new={wallet.wallet_balance}"
    )
    return {
        "success": True,
        "message": "Payment credited successfully",
        "amount": float(net_amount),
        "newBalance": float(wallet.wallet_balance),
    }
