from decimal import Decimal

from django.test import TestCase, override_settings
from django.urls import reverse

from notification.models import Notification
from payments.callbacks import process_charge_success
from payments.models import Transaction
from tests.helpers import (
    TEST_SECRET,
    charge_failed,
    charge_success,
    make_transaction,
    make_user,
    signed_body,
)
from wallet.models import PlatformFee, Wallet, WalletTransaction


@override_settings(PAYSTACK_SECRET_KEY=TEST_SECRET)
class PaystackCallbackTests(TestCase):
    def setUp(self):
        self.url = reverse("payments:paystack_callback")
        self.user = make_user("wanjiru")

    def deliver(self, payload, signature=None):
        body, valid_signature = signed_body(payload)
        return self.client.post(
            self.url,
            data=body,
            content_type="application/json",
            HTTP_X_PAYSTACK_SIGNATURE=valid_signature if signature is None else signature,
        )

    def test_bad_signature_is_rejected_without_mutation(self):
        make_transaction(self.user, "ref-bad")
        response = self.deliver(charge_success("ref-bad"), signature="0" * 128)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(Transaction.objects.get(transaction_reference="ref-bad").transaction_status, "pending")
        self.assertFalse(Wallet.objects.exists())

    def test_non_ascii_signature_is_rejected(self):
        make_transaction(self.user, "ref-accent")
        response = self.deliver(charge_success("ref-accent"), signature="\u00e9" * 128)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(Transaction.objects.get(transaction_reference="ref-accent").transaction_status, "pending")

    def test_missing_signature_is_rejected(self):
        body, _ = signed_body(charge_success("ref-none"))
        response = self.client.post(self.url, data=body, content_type="application/json")
        self.assertEqual(response.status_code, 401)

    @override_settings(PAYSTACK_SECRET_KEY="")
    def test_unconfigured_secret_is_a_server_error(self):
        response = self.deliver(charge_success("ref-x"))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.content, b"Configuration error")

    def test_charge_success_credits_net_amount(self):
        Wallet.objects.create(wallet_user=self.user, wallet_balance=Decimal("50.00"))
        make_transaction(self.user, "ref-ok", amount="100.00")

        response = self.deliver(charge_success("ref-ok", amount=10000))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"OK")

        wallet = Wallet.objects.get(wallet_user=self.user)
        self.assertEqual(wallet.wallet_balance, Decimal("147.50"))

        tx = Transaction.objects.get(transaction_reference="ref-ok")
        self.assertEqual(tx.transaction_status, "success")
        self.assertEqual(tx.transaction_result_code, 0)
        self.assertEqual(tx.transaction_result_desc, "Payment via mobile_money successful")
        self.assertEqual(tx.transaction_receipt_number, "ref-ok")
        self.assertEqual(tx.transaction_callback_data["event"], "charge.success")
        self.assertIsNotNone(tx.transaction_date)

        entry = WalletTransaction.objects.get(wallet_transaction_reference="ref-ok")
        self.assertEqual(entry.wallet_transaction_amount, Decimal("97.50"))
        self.assertEqual(entry.wallet_transaction_type, "deposit")
        self.assertEqual(entry.wallet_transaction_description, "M-Pesa deposit (Fee: KES 2.50)")
        self.assertEqual(entry.wallet_transaction_payment_method, "mobile_money")
        self.assertEqual(entry.wallet_transaction_currency, "KES")

        notification = Notification.objects.get(notification_user=self.user)
        self.assertEqual(notification.notification_type, "payment_success")
        self.assertEqual(notification.notification_message, "KES 97.50 added via M-Pesa/Airtel Money")

        fee = PlatformFee.objects.get(platform_fee_payment_reference="ref-ok")
        self.assertEqual(fee.platform_fee_amount, Decimal("2.50"))
        self.assertEqual(fee.platform_fee_user, self.user)

    def test_wallet_is_created_on_first_credit(self):
        make_transaction(self.user, "ref-new")
        self.deliver(charge_success("ref-new", amount=10000, channel="card"))

        wallet = Wallet.objects.get(wallet_user=self.user)
        self.assertEqual(wallet.wallet_balance, Decimal("97.50"))
        entry = WalletTransaction.objects.get(wallet_transaction_reference="ref-new")
        self.assertEqual(entry.wallet_transaction_description, "Card deposit (Fee: KES 2.50)")

    def test_fractional_fee_is_kept_in_wallet_and_fee_ledger(self):
        make_transaction(self.user, "ref-shilling", amount="1.00")
        self.deliver(charge_success("ref-shilling", amount=100))

        self.assertEqual(Wallet.objects.get(wallet_user=self.user).wallet_balance, Decimal("0.975"))
        entry = WalletTransaction.objects.get(wallet_transaction_reference="ref-shilling")
        self.assertEqual(entry.wallet_transaction_amount, Decimal("0.975"))
        self.assertEqual(entry.wallet_transaction_description, "M-Pesa deposit (Fee: KES 0.03)")
        fee = PlatformFee.objects.get(platform_fee_payment_reference="ref-shilling")
        self.assertEqual(fee.platform_fee_amount, Decimal("0.025"))
        self.assertEqual(fee.platform_fee_amount + entry.wallet_transaction_amount, Decimal("1.00"))

    def test_duplicate_delivery_credits_twice(self):
        Wallet.objects.create(wallet_user=self.user, wallet_balance=Decimal("10.00"))
        make_transaction(self.user, "ref-dup")

        self.deliver(charge_success("ref-dup", amount=10000))
        self.deliver(charge_success("ref-dup", amount=10000))

        wallet = Wallet.objects.get(wallet_user=self.user)
        self.assertEqual(wallet.wallet_balance, Decimal("205.00"))
        self.assertEqual(WalletTransaction.objects.filter(wallet_transaction_reference="ref-dup").count(), 2)

    @override_settings(PAYMENTS_IDEMPOTENT_CREDIT=True)
    def test_idempotent_setting_blocks_second_credit(self):
        make_transaction(self.user, "ref-once")

        self.deliver(charge_success("ref-once", amount=10000))
        self.deliver(charge_success("ref-once", amount=10000))

        self.assertEqual(Wallet.objects.get(wallet_user=self.user).wallet_balance, Decimal("97.50"))

    def test_non_wallet_purpose_only_collects_fee(self):
        make_transaction(self.user, "ref-contrib", purpose="contribution")
        self.deliver(charge_success("ref-contrib", amount=20000))

        self.assertFalse(Wallet.objects.filter(wallet_user=self.user).exists())
        self.assertEqual(
            Transaction.objects.get(transaction_reference="ref-contrib").transaction_status, "success"
        )
        fee = PlatformFee.objects.get(platform_fee_payment_reference="ref-contrib")
        self.assertEqual(fee.platform_fee_amount, Decimal("5.00"))

    def test_other_purpose_credits_wallet(self):
        make_transaction(self.user, "ref-other", purpose="other")
        self.deliver(charge_success("ref-other", amount=10000))
        self.assertEqual(Wallet.objects.get(wallet_user=self.user).wallet_balance, Decimal("97.50"))

    def test_unknown_reference_is_acknowledged(self):
        response = self.deliver(charge_success("ref-missing"))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Wallet.objects.exists())
        self.assertFalse(PlatformFee.objects.exists())

    def test_invalid_json_with_valid_signature_is_acknowledged(self):
        from payments.paystack import compute_signature

        body = b"not json"
        response = self.client.post(
            self.url,
            data=body,
            content_type="application/json",
            HTTP_X_PAYSTACK_SIGNATURE=compute_signature(TEST_SECRET, body),
        )
        self.assertEqual(response.status_code, 200)

    def test_unhandled_event_is_acknowledged(self):
        response = self.deliver({"event": "transfer.success", "data": {"reference": "t-1"}})
        self.assertEqual(response.status_code, 200)

    def test_charge_failed_records_balance_and_notifies(self):
        make_transaction(self.user, "ref-fail", amount="500.00")
        response = self.deliver(charge_failed("ref-fail", "Your Airtel Money balance is Ksh 35.00"))

        self.assertEqual(response.status_code, 200)
        tx = Transaction.objects.get(transaction_reference="ref-fail")
        self.assertEqual(tx.transaction_status, "failed")
        self.assertEqual(tx.transaction_result_code, 1)
        self.assertIn("KES 35.00", tx.transaction_result_desc)
        self.assertEqual(tx.transaction_callback_data["available_balance"], 35.0)
        self.assertEqual(
            tx.transaction_callback_data["original_message"], "Your Airtel Money balance is Ksh 35.00"
        )

        notification = Notification.objects.get(notification_user=self.user)
        self.assertEqual(notification.notification_type, "payment_failed")
        self.assertIn("KES 35.00", notification.notification_message)
        self.assertEqual(notification.notification_data["amount"], 500.0)
        self.assertFalse(Wallet.objects.exists())

    def test_charge_failed_prefers_structured_reason(self):
        make_transaction(self.user, "ref-coded", amount="250.00")
        self.deliver(charge_failed(
            "ref-coded", "Declined", channel="card", failure_reason="insufficient_funds", gateway_code="51"
        ))

        tx = Transaction.objects.get(transaction_reference="ref-coded")
        self.assertEqual(tx.transaction_status, "failed")
        self.assertIn("Insufficient account balance", tx.transaction_result_desc)
        self.assertNotEqual(tx.transaction_result_desc, "Declined")
        self.assertEqual(tx.transaction_callback_data["failure_reason"], "insufficient_funds")

        notification = Notification.objects.get(notification_user=self.user)
        self.assertEqual(notification.notification_data["failure_reason"], "insufficient_funds")

    def test_charge_failed_maps_gateway_code(self):
        make_transaction(self.user, "ref-pin", amount="250.00")
        self.deliver(charge_failed("ref-pin", "Declined", channel="card", gateway_code="55"))

        tx = Transaction.objects.get(transaction_reference="ref-pin")
        self.assertIn("Incorrect PIN entered", tx.transaction_result_desc)

    def test_charge_failed_for_unknown_reference_sends_nothing(self):
        response = self.deliver(charge_failed("ref-ghost", "Declined", channel="card"))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Notification.objects.exists())

    def test_cors_preflight_allows_any_origin(self):
        response = self.client.options(
            self.url,
            HTTP_ORIGIN="https://chama.example.com",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
            HTTP_ACCESS_CONTROL_REQUEST_HEADERS="x-paystack-signature",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["access-control-allow-origin"], "*")
        self.assertIn("x-paystack-signature", response["access-control-allow-headers"])


class CallbackPipelineTests(TestCase):
    def setUp(self):
        self.user = make_user("otieno")

    def test_steps_run_in_order(self):
        make_transaction(self.user, "ref-steps")
        outcome = process_charge_success(charge_success("ref-steps"))

        self.assertTrue(outcome.ok)
        self.assertEqual(
            outcome.completed,
            ["lookup_transaction", "mark_status", "credit_wallet", "record_ledger_entry", "notify", "collect_fee"],
        )

    def test_lookup_miss_is_captured_and_wallet_steps_skipped(self):
        outcome = process_charge_success(charge_success("ref-nowhere"))

        self.assertIn("lookup_transaction", outcome.errors)
        self.assertIn("mark_status", outcome.completed)
        self.assertIn("credit_wallet", outcome.skipped)

    def test_failed_credit_skips_dependent_steps_but_collects_fee(self):
        tx = make_transaction(self.user, "ref-orphan")
        Transaction.objects.filter(pk=tx.pk).update(transaction_user=None)

        outcome = process_charge_success(charge_success("ref-orphan"))

        self.assertIn("credit_wallet", outcome.errors)
        self.assertIn("record_ledger_entry", outcome.skipped)
        self.assertIn("notify", outcome.skipped)
        self.assertIn("collect_fee", outcome.completed)
        self.assertFalse(WalletTransaction.objects.exists())
