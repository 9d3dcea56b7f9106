import json
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from payments.models import Transaction
from payments.paystack import compute_signature

TEST_SECRET = "sk_test_chamawallet"


def make_user(username, **extra):
    extra.setdefault("email", f"{username}@example.com")
    return get_user_model().objects.create_user(username=username, password="pass12345", **extra)


def make_transaction(user, reference, amount="100.00", purpose="wallet_topup",
                     status="pending", tx_type="paystack", age=None, chama=None):
    tx = Transaction.objects.create(
        transaction_user=user,
        transaction_chama=chama,
        transaction_reference=reference,
        transaction_amount=Decimal(amount),
        transaction_purpose=purpose,
        transaction_status=status,
        transaction_type=tx_type,
    )
    if age is not None:
        Transaction.objects.filter(pk=tx.pk).update(transaction_created_at=timezone.now() - age)
        tx.refresh_from_db()
    return tx


def minutes(value):
    return timedelta(minutes=value)


def signed_body(payload, secret=TEST_SECRET):
    body = json.dumps(payload).encode("utf-8")
    return body, compute_signature(secret, body)


def charge_success(reference, amount=10000, channel="mobile_money"):
    return {
        "event": "charge.success",
        "data": {
            "reference": reference,
            "amount": amount,
            "channel": channel,
            "paid_at": "2026-10-19T08:30:00.000Z",
            "customer": {"email": "payer@example.com"},
        },
    }


def charge_failed(reference, gateway_response, channel="mobile_money", **extra):
    return {
        "event": "charge.failed",
        "data": {
            "reference": reference,
            "gateway_response": gateway_response,
            "channel": channel,
            "customer": {"email": "payer@example.com"},
            **extra,
        },
    }
