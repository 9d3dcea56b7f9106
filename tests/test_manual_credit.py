import json
from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse

from payments.exceptions import TransactionNotFound
from payments.models import Transaction
from payments.services import manual_credit_payment
from tests.helpers import make_transaction, make_user
from wallet.models import Wallet, WalletTransaction


class ManualCreditServiceTests(TestCase):
    def setUp(self):
        self.user = make_user("achieng")

    def test_credits_net_of_fee_from_stored_amount(self):
        make_transaction(self.user, "ref-m1", amount="100.00")

        result = manual_credit_payment("ref-m1")

        self.assertEqual(result, {
            "success": True,
            "message": "Payment credited successfully",
            "amount": 97.5,
            "newBalance": 97.5,
        })
        tx = Transaction.objects.get(transaction_reference="ref-m1")
        self.assertEqual(tx.transaction_status, "success")
        self.assertEqual(tx.transaction_result_desc, "Payment verified and credited manually")

        entry = WalletTransaction.objects.get(wallet_transaction_reference="ref-m1")
        self.assertEqual(entry.wallet_transaction_description, "Wallet top-up via Paystack (Fee: KES 2.50)")
        self.assertEqual(entry.wallet_transaction_payment_method, "paystack")

    def test_unknown_reference_raises(self):
        with self.assertRaises(TransactionNotFound):
            manual_credit_payment("ref-missing")

    def test_second_call_credits_again(self):
        Wallet.objects.create(wallet_user=self.user, wallet_balance=Decimal("20.00"))
        make_transaction(self.user, "ref-twice", amount="100.00")

        manual_credit_payment("ref-twice")
        result = manual_credit_payment("ref-twice")

        self.assertEqual(result["newBalance"], 215.0)
        self.assertEqual(Wallet.objects.get(wallet_user=self.user).wallet_balance, Decimal("215.00"))
        self.assertEqual(WalletTransaction.objects.filter(wallet_transaction_reference="ref-twice").count(), 2)

    def test_already_successful_transaction_is_still_credited(self):
        make_transaction(self.user, "ref-done", amount="40.00", status="success")
        result = manual_credit_payment("ref-done")
        self.assertEqual(result["amount"], 39.0)

    def test_fee_on_small_amount_is_not_rounded(self):
        make_transaction(self.user, "ref-small", amount="1.00")
        result = manual_credit_payment("ref-small")
        self.assertEqual(result["amount"], 0.975)
        self.assertEqual(Wallet.objects.get(wallet_user=self.user).wallet_balance, Decimal("0.975"))

    @override_settings(PAYMENTS_IDEMPOTENT_CREDIT=True)
    def test_idempotent_setting_skips_repeat(self):
        make_transaction(self.user, "ref-guard", amount="100.00")

        manual_credit_payment("ref-guard")
        result = manual_credit_payment("ref-guard")

        self.assertEqual(result["amount"], 0.0)
        self.assertEqual(result["newBalance"], 97.5)


@override_settings(PAYMENTS_SERVICE_TOKEN="svc-token")
class ManualCreditViewTests(TestCase):
    def setUp(self):
        self.url = reverse("payments:manual_credit")
        self.user = make_user("kamau")

    def post(self, payload, **extra):
        return self.client.post(self.url, data=json.dumps(payload), content_type="application/json", **extra)

    def test_requires_session_or_service_token(self):
        make_transaction(self.user, "ref-anon")
        response = self.post({"reference": "ref-anon"})
        self.assertEqual(response.status_code, 401)
        self.assertFalse(Wallet.objects.exists())

    def test_wrong_service_token_is_rejected(self):
        response = self.post({"reference": "ref-x"}, HTTP_AUTHORIZATION="Bearer nope")
        self.assertEqual(response.status_code, 401)

    def test_non_ascii_token_is_rejected(self):
        response = self.post({"reference": "ref-x"}, HTTP_AUTHORIZATION="Bearer \u00e9")
        self.assertEqual(response.status_code, 401)

    def test_service_token_credits(self):
        make_transaction(self.user, "ref-svc", amount="200.00")
        response = self.post({"reference": "ref-svc"}, HTTP_AUTHORIZATION="Bearer svc-token")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["amount"], 195.0)
        self.assertEqual(body["newBalance"], 195.0)

    def test_logged_in_user_can_credit_any_reference(self):
        owner = make_user("owner")
        make_transaction(owner, "ref-owner", amount="100.00")
        self.client.force_login(self.user)

        response = self.post({"reference": "ref-owner"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(Wallet.objects.get(wallet_user=owner).wallet_balance, Decimal("97.50"))

    def test_unknown_reference_is_a_400(self):
        self.client.force_login(self.user)
        response = self.post({"reference": "ref-nothing"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"success": False, "error": "Transaction not found"})

    def test_malformed_body_is_a_400(self):
        self.client.force_login(self.user)
        response = self.client.post(self.url, data="{", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_get_is_not_allowed(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)
