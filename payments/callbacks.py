import logging
import re
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import transaction
from django.utils.dateparse import parse_datetime

from common.utils import notify_user
from payments.models import Transaction
from payments.services import get_transaction, mark_transaction_failed, mark_transaction_success
from wallet.services import (
    collect_platform_fee,
    credit_wallet,
    has_been_credited,
    record_wallet_transaction,
    split_platform_fee,
    to_money,
)

logger = logging.getLogger(__name__)

CHARGE_SUCCESS = "charge.success"
CHARGE_FAILED = "charge.failed"

# Best-effort text match on the gateway message, e.g.
# "Your Airtel Money balance is Ksh 35.00". Not a processor contract.
BALANCE_PATTERN = re.compile(r"balance is\s+(?:Ksh|KES)\.?\s*([0-9][0-9,]*(?:\.[0-9]+)?)", re.IGNORECASE)

DEPOSIT_SOURCE_LABELS = {
    "mobile_money": "M-Pesa",
    "bank": "Bank Transfer",
    "card": "Card",
}

NOTIFICATION_SOURCE_LABELS = {
    "mobile_money": "M-Pesa/Airtel Money",
    "bank": "Bank Transfer",
    "card": "Card Payment",
}

# Issuer response codes mapped onto failure reasons.
GATEWAY_CODE_REASONS = {
    "51": "insufficient_funds",
    "55": "incorrect_pin",
    "54": "expired_card",
    "57": "not_permitted",
    "61": "limit_exceeded",
    "91": "issuer_unavailable",
}

FAILURE_REASON_MESSAGES = {
    "incorrect_pin": "Incorrect PIN entered",
    "expired_card": "Your card has expired",
    "not_permitted": "This transaction is not permitted on your account",
    "limit_exceeded": "Transaction limit exceeded",
    "issuer_unavailable": "Your bank or provider is unavailable right now",
    "timeout": "The payment request timed out",
    "cancelled": "The payment was cancelled",
}


class CallbackOutcome:
    """
    Runs the side effects of one callback as named steps.

    Each step gets its own savepoint. A failing step is recorded in ``errors``
    and logged; steps that require it are skipped. Nothing is retried or
    compensated.
    """

    def __init__(self, event, reference=None):
        self.event = event
        self.reference = reference
        self.completed = []
        self.skipped = {}
        self.errors = {}

    @property
    def ok(self):
        return not self.errors

    def skip(self, name, reason):
        self.skipped[name] = reason
        logger.info(f"[{self.reference}] step {name} skipped: {reason}")

    def run(self, name, func, *args, requires=(), **kwargs):
        missing = [step for step in requires if step not in self.completed]
        if missing:
            self.skip(name, f"requires {', '.join(missing)}")
            return None
        try:
            with transaction.atomic():
                result = func(*args, **kwargs)
        except Exception as e:
            self.errors[name] = str(e)
            logger.error(f"[{self.reference}] step {name} failed: {e}", exc_info=True)
            return None
        self.completed.append(name)
        return result


def parse_available_balance(message):
    if not message:
        return None
    match = BALANCE_PATTERN.search(message)
    if not match:
        return None
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return None


def extract_available_balance(data):
    """Prefer a structured balance from the processor; fall back to the text heuristic."""
    structured = data.get("available_balance")
    if structured is not None:
        try:
            return Decimal(str(structured))
        except InvalidOperation:
            pass
    return parse_available_balance(data.get("gateway_response"))


def extract_failure_reason(data):
    """
    Structured reason code for a failed charge, or None.

    ``failure_reason`` wins over ``gateway_code``; codes with no known reason
    are ignored so the text heuristic can take over.
    """
    reason = (data.get("failure_reason") or "").strip().lower()
    if reason:
        return reason
    code = data.get("gateway_code")
    if code is None:
        return None
    return GATEWAY_CODE_REASONS.get(str(code).strip())


def build_failure_message(gateway_response, channel, available_balance=None, failure_reason=None):
    parsed_message = gateway_response or "Payment failed"
    source = "mobile money" if channel == "mobile_money" else "account"
    if failure_reason == "insufficient_funds" or (failure_reason is None and available_balance is not None):
        lines = [f"💳 Payment failed: Insufficient {source} balance"]
        if available_balance is not None:
            lines.append(f"💼 Available balance: KES {available_balance:.2f}")
        lines.append("🔁 Please top up your account or try a smaller amount.")
        return "\n".join(lines)
    if failure_reason in FAILURE_REASON_MESSAGES:
        return f"💳 Payment failed: {FAILURE_REASON_MESSAGES[failure_reason]}\n🔁 Please try again."
    if channel == "mobile_money":
        return (
            f"💳 Mobile Money transaction failed\n"
            f"{parsed_message}\n"
            f"🔁 Please try again or contact your provider."
        )
    return parsed_message


def amount_from_minor_units(amount):
    return to_money(Decimal(str(amount or 0)) / 100)


def _parse_paid_at(paid_at):
    if not paid_at:
        return None
    try:
        return parse_datetime(paid_at)
    except (TypeError, ValueError):
        return None


def _notify_success(tx, net_amount, channel, reference, paid_at):
    source = NOTIFICATION_SOURCE_LABELS.get(channel, "Paystack")
    return notify_user(
        tx.transaction_user,
        "💰 Payment Successful",
        f"KES {to_money(net_amount)} added via {source}",
        "payment_success",
        chama=tx.transaction_chama,
        data={
            "amount": float(net_amount),
            "channel": channel,
            "reference": reference,
            "timestamp": paid_at,
        },
    )


def process_charge_success(payload):
    data = payload.get("data") or {}
    reference = data.get("reference")
    channel = data.get("channel")
    paid_at = data.get("paid_at")
    customer = data.get("customer") or {}
    outcome = CallbackOutcome(CHARGE_SUCCESS, reference)

    amount_paid = amount_from_minor_units(data.get("amount"))
    platform_fee, net_amount = split_platform_fee(amount_paid)
    logger.info(
        f"Processing successful payment {reference}: amount={amount_paid} fee={platform_fee} "
        f"net={net_amount} channel={channel} customer={customer.get('email')}"
    )

    tx = outcome.run("lookup_transaction", get_transaction, reference)

    outcome.run(
        "mark_status",
        mark_transaction_success,
        reference,
        f"Payment via {channel} successful",
        paid_at=_parse_paid_at(paid_at),
        callback_data=payload,
    )

    if tx is None:
        outcome.skip("credit_wallet", "transaction not found")
        return outcome

    if not tx.credits_wallet:
        outcome.skip("credit_wallet", f"purpose {tx.transaction_purpose} does not credit the wallet")
    elif settings.PAYMENTS_IDEMPOTENT_CREDIT and has_been_credited(reference):
        outcome.skip("credit_wallet", "reference already credited")
    else:
        outcome.run("credit_wallet", credit_wallet, tx.transaction_user, net_amount)
        source = DEPOSIT_SOURCE_LABELS.get(channel, "Paystack")
        outcome.run(
            "record_ledger_entry",
            record_wallet_transaction,
            tx.transaction_user,
            net_amount,
            f"{source} deposit (Fee: KES {to_money(platform_fee)})",
            reference,
            channel,
            requires=("credit_wallet",),
        )
        outcome.run(
            "notify",
            _notify_success,
            tx, net_amount, channel, reference, paid_at,
            requires=("credit_wallet",),
        )

    outcome.run(
        "collect_fee",
        collect_platform_fee,
        tx.transaction_user,
        platform_fee,
        reference,
        source_transaction_id=(tx.transaction_metadata or {}).get("transaction_id"),
    )
    return outcome


def process_charge_failed(payload):
    data = payload.get("data") or {}
    reference = data.get("reference")
    gateway_response = data.get("gateway_response")
    channel = data.get("channel")
    outcome = CallbackOutcome(CHARGE_FAILED, reference)

    logger.info(f"Processing failed payment {reference}: channel={channel} reason={gateway_response}")

    available_balance = extract_available_balance(data)
    failure_reason = extract_failure_reason(data)
    user_message = build_failure_message(gateway_response, channel, available_balance, failure_reason)
    callback_data = {
        **payload,
        "available_balance": float(available_balance) if available_balance is not None else None,
        "original_message": gateway_response,
        "failure_reason": failure_reason,
    }

    outcome.run("mark_status", mark_transaction_failed, reference, user_message, callback_data)

    tx = Transaction.objects.select_related("transaction_user", "transaction_chama").filter(
        transaction_reference=reference
    ).first()
    if tx is None or tx.transaction_user_id is None:
        outcome.skip("notify", "no user for reference")
        return outcome

    outcome.run(
        "notify",
        notify_user,
        tx.transaction_user,
        "❌ Payment Failed",
        user_message,
        "payment_failed",
        chama=tx.transaction_chama,
        data={
            "amount": float(tx.transaction_amount),
            "channel": channel,
            "reference": reference,
            "available_balance": callback_data["available_balance"],
            "reason": gateway_response,
            "failure_reason": failure_reason,
        },
        priority="high",
    )
    return outcome


EVENT_HANDLERS = {
    CHARGE_SUCCESS: process_charge_success,
    CHARGE_FAILED: process_charge_failed,
}


def handle_event(payload):
    event = payload.get("event")
    handler = EVENT_HANDLERS.get(event)
    if handler is None:
        logger.info(f"Ignoring webhook event: {event}")
        return None
    outcome = handler(payload)
    if not outcome.ok:
        logger.warning(f"Webhook {event} for {outcome.reference} finished with errors: {outcome.errors}")
    return outcome
