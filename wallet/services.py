import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings
from django.db import transaction

from wallet.models import Wallet, WalletTransaction, PlatformFee

logger = logging.getLogger(__name__)

MONEY_QUANT = Decimal("0.01")
# Wallet and fee columns keep six places so fee + net == paid exactly.
LEDGER_QUANT = Decimal("0.000001")


def to_money(value):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Invalid amount: {value!r}")
    return amount.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def to_ledger_amount(value):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError(f"Invalid amount: {value!r}")
    return amount.quantize(LEDGER_QUANT, rounding=ROUND_HALF_UP)


def split_platform_fee(amount_paid):
    """
    Return ``(fee, net)`` for a paid amount; ``fee + net == amount_paid``.

    The fee is not rounded to cents: 1.00 paid gives a fee of 0.025 and a
    net of 0.975. Round only for display.
    """
    amount_paid = to_money(amount_paid)
    fee = to_ledger_amount(amount_paid * settings.PLATFORM_FEE_RATE)
    return fee, amount_paid - fee


def get_or_create_wallet(user):
    wallet, created = Wallet.objects.get_or_create(
        wallet_user=user,
        defaults={"wallet_balance": Decimal("0"), "wallet_currency": settings.DEFAULT_CURRENCY},
    )
    if created:
        logger.info(f"Created wallet for user {user.pk}")
    return wallet


def credit_wallet(user, amount):
    """
    Add ``amount`` to the user's wallet, creating it on first credit.

    The read and the write happen under a row lock so concurrent credits to the
    same wallet cannot lose an update. Returns ``(wallet, previous_balance)``.
    """
    amount = to_ledger_amount(amount)
    with transaction.atomic():
        wallet, created = Wallet.objects.select_for_update().get_or_create(
            wallet_user=user,
            defaults={"wallet_balance": Decimal("0"), "wallet_currency": settings.DEFAULT_CURRENCY},
        )
        previous_balance = wallet.wallet_balance
        wallet.wallet_balance = previous_balance + amount
        wallet.save(update_fields=["wallet_balance", "wallet_updated_at"])

    logger.info(
        f"Wallet credited: user={user.pk} previous={previous_balance} "
        f"added={amount} new={wallet.wallet_balance} created={created}"
    )
    return wallet, previous_balance


def record_wallet_transaction(user, amount, description, reference, payment_method,
                              currency=None, tx_type="deposit", status="completed"):
    return WalletTransaction.objects.create(
        wallet_transaction_user=user,
        wallet_transaction_type=tx_type,
        wallet_transaction_amount=to_ledger_amount(amount),
        wallet_transaction_description=description,
        wallet_transaction_status=status,
        wallet_transaction_reference=reference,
        wallet_transaction_payment_method=payment_method,
        wallet_transaction_currency=currency or settings.DEFAULT_CURRENCY,
    )


def has_been_credited(reference):
    return WalletTransaction.objects.filter(
        wallet_transaction_reference=reference,
        wallet_transaction_type="deposit",
        wallet_transaction_status="completed",
    ).exists()


def collect_platform_fee(user, amount, payment_reference, source_transaction_id=None, fee_type="transaction"):
    fee = PlatformFee.objects.create(
        platform_fee_user=user,
        platform_fee_type=fee_type,
        platform_fee_amount=to_ledger_amount(amount),
        platform_fee_source_transaction_id=source_transaction_id,
        platform_fee_payment_reference=payment_reference,
    )
    logger.info(f"Platform fee collected: {fee.platform_fee_amount} ({payment_reference})")
    return fee
