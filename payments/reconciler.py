import logging
import time
from datetime import timedelta

import requests
from django.conf import settings
from django.utils import timezone

from common.utils import invalidate_wallet_views
from payments.exceptions import PaymentError
from payments.models import Transaction
from payments.services import manual_credit_payment

logger = logging.getLogger(__name__)


def stuck_payment_threshold():
    return timedelta(seconds=settings.STUCK_PAYMENT_THRESHOLD_SECONDS)


def find_stuck_payments(user=None, now=None, threshold=None):
    """
    Paystack transactions still ``pending`` that were created more than
    ``threshold`` ago (default STUCK_PAYMENT_THRESHOLD_SECONDS). Limited to
    ``user`` when one is given.
    """
    now = now or timezone.now()
    cutoff = now - (threshold if threshold is not None else stuck_payment_threshold())
    qs = Transaction.objects.filter(
        transaction_type="paystack",
        transaction_status="pending",
        transaction_created_at__lt=cutoff,
    )
    if user is not None:
        qs = qs.filter(transaction_user=user)
    return list(qs.order_by("transaction_created_at"))


def credit_in_process(reference):
    """Invoke the manual credit function directly; returns its response body."""
    try:
        return manual_credit_payment(reference)
    except PaymentError as e:
        return {"success": False, "error": str(e)}


class HttpCreditInvoker:
    """Invoke the manual credit endpoint over HTTP with the service token."""

    def __init__(self, url=None, token=None, timeout=30, session=None):
        self.url = url or settings.PAYMENTS_MANUAL_CREDIT_URL
        self.token = token if token is not None else settings.PAYMENTS_SERVICE_TOKEN
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self, reference):
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.session.post(
            self.url, json={"reference": reference}, headers=headers, timeout=self.timeout
        )
        try:
            return response.json()
        except ValueError:
            return {"success": False, "error": f"HTTP {response.status_code}"}


class StuckPaymentReconciler:
    """
    Finds payments stuck in ``pending`` and pushes each one through the
    manual credit function.

    Two cycles cooperate: ``fetch`` re-queries the stuck set (every
    ``interval`` seconds, and right away when the observed user changes) and
    ``react`` credits the set whenever it differs from the last one fetched.
    A failed credit is logged and the loop moves on; the item is only looked
    at again if a later fetch returns a different set.
    """

    def __init__(self, credit=None, interval=None, threshold=None, clock=None, sleep=None, on_credited=None):
        self.credit = credit or credit_in_process
        self.interval = interval if interval is not None else settings.STUCK_PAYMENT_POLL_INTERVAL_SECONDS
        self.threshold = threshold
        self.clock = clock or timezone.now
        self.sleep = sleep or time.sleep
        self.on_credited = on_credited
        self.user = None
        self.stuck_payments = []
        self._last_references = None

    def observe(self, user):
        """Switch the observed user; a change triggers an immediate fetch."""
        changed = getattr(user, "pk", None) != getattr(self.user, "pk", None)
        self.user = user
        if changed:
            self._last_references = None
            return self.tick()
        return []

    def fetch(self):
        self.stuck_payments = find_stuck_payments(self.user, now=self.clock(), threshold=self.threshold)
        references = tuple(tx.transaction_reference for tx in self.stuck_payments)
        changed = references != self._last_references
        self._last_references = references
        return changed

    def tick(self):
        """One fetch cycle, followed by a reaction cycle when the set changed."""
        if self.fetch() and self.stuck_payments:
            return self.react(self.stuck_payments)
        return []

    def react(self, payments):
        """
        Credit each payment in turn; returns ``(reference, result)`` pairs.

        A success drops only the credited user's cached wallet and
        stuck-payment views. Both caches are keyed per user, so other users'
        entries never hold this wallet.
        """
        results = []
        for payment in payments:
            reference = payment.transaction_reference
            try:
                result = self.credit(reference)
            except Exception as e:
                logger.error(f"Error crediting stuck payment {reference}: {e}", exc_info=True)
                results.append((reference, {"success": False, "error": str(e)}))
                continue

            if not result or not result.get("success"):
                logger.error(f"Failed to credit payment {reference}: {(result or {}).get('error')}")
                results.append((reference, result))
                continue

            logger.info(
                f"Payment Credited ✅ KES {result.get('amount', 0):.2f} has been added to the wallet ({reference})"
            )
            if payment.transaction_user_id:
                invalidate_wallet_views(payment.transaction_user_id)
            if self.on_credited:
                self.on_credited(payment, result)
            results.append((reference, result))
        return results

    def run(self, user=None, iterations=None):
        """Poll until ``iterations`` cycles have run (forever when None)."""
        if user is not None:
            self.observe(user)
        else:
            self.tick()
        count = 1
        while iterations is None or count < iterations:
            self.sleep(self.interval)
            self.tick()
            count += 1
