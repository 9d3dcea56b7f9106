import hashlib
import hmac
import logging
import uuid

import requests
from django.conf import settings

from payments.exceptions import PaymentConfigurationError, PaystackError
from payments.models import Transaction
from wallet.services import to_money

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"


def get_secret_key():
    secret = settings.PAYSTACK_SECRET_KEY
    if not secret:
        raise PaymentConfigurationError("PAYSTACK_SECRET_KEY not configured")
    return secret


def compute_signature(secret, raw_body):
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    return hmac.new(secret, raw_body, hashlib.sha512).hexdigest()


def verify_signature(raw_body, signature, secret=None):
    """True iff ``signature`` is the hex HMAC-SHA512 of ``raw_body`` under the secret."""
    if not signature:
        return False
    digest = compute_signature(secret or get_secret_key(), raw_body)
    return hmac.compare_digest(digest.encode("ascii"), signature.encode("utf-8", "replace"))


def _headers():
    return {
        "Authorization": f"Bearer {get_secret_key()}",
        "Content-Type": "application/json",
    }


def to_minor_units(amount):
    return int(to_money(amount) * 100)


def initialize_transaction(user, email, amount, purpose="wallet_topup", chama=None, phone=None):
    """
    Initialize a Paystack charge and save it as a pending Transaction.
    Args:
        user: User paying
        email: customer email sent to Paystack
        amount: amount in major units (KES)
        purpose: transaction purpose ('wallet_topup', 'other', 'contribution')
        chama: optional Chama the payment belongs to
        phone: optional payer phone number

    Raises ValueError for a bad amount, PaymentConfigurationError when the
    secret key is missing and PaystackError when the gateway rejects the
    request or cannot be reached.
    """
    amount = to_money(amount)
    if amount <= 0:
        raise ValueError("Amount must be greater than 0.")

    reference = f"CW-{uuid.uuid4().hex[:20]}"
    payload = {
        "email": email,
        "amount": to_minor_units(amount),
        "currency": settings.DEFAULT_CURRENCY,
        "reference": reference,
        "channels": ["mobile_money", "card", "bank"],
        "metadata": {
            "user_id": user.pk,
            "chama_id": chama.pk if chama else None,
            "purpose": purpose,
        },
    }
    if settings.PAYSTACK_CALLBACK_URL:
        payload["callback_url"] = settings.PAYSTACK_CALLBACK_URL

    url = f"{settings.PAYSTACK_BASE_URL.rstrip('/')}/transaction/initialize"
    try:
        response = requests.post(url, json=payload, headers=_headers(), timeout=settings.PAYSTACK_TIMEOUT_SECONDS)
    except requests.exceptions.Timeout:
        raise PaystackError("Request timeout. Please try again.")
    except requests.exceptions.RequestException as e:
        logger.error(f"Paystack network error: {e}", exc_info=True)
        raise PaystackError(f"Network error: {str(e)}")

    try:
        response_data = response.json()
    except ValueError:
        raise PaystackError(f"Unexpected response from Paystack (HTTP {response.status_code})")

    if response.status_code >= 400 or not response_data.get("status"):
        error_msg = response_data.get("message") or "Payment initialization failed"
        logger.warning(f"Paystack initialize failed ({response.status_code}): {error_msg}")
        raise PaystackError(str(error_msg))

    data = response_data.get("data") or {}
    reference = data.get("reference") or reference
    Transaction.objects.create(
        transaction_user=user,
        transaction_chama=chama,
        transaction_reference=reference,
        transaction_type="paystack",
        transaction_purpose=purpose,
        transaction_amount=amount,
        transaction_phone_number=phone,
        transaction_status="pending",
        transaction_metadata=payload["metadata"],
    )
    logger.info(f"Paystack charge initialized: {reference} amount={amount}")
    return {
        "success": True,
        "reference": reference,
        "authorization_url": data.get("authorization_url"),
        "access_code": data.get("access_code"),
    }
