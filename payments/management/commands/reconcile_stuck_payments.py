from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from payments.reconciler import HttpCreditInvoker, StuckPaymentReconciler


class Command(BaseCommand):
    help = "Credit Paystack payments stuck in pending through the manual credit function."

    def add_arguments(self, parser):
        parser.add_argument("--user", type=int, help="Only reconcile payments owned by this user id.")
        parser.add_argument("--once", action="store_true", help="Run a single cycle and exit.")
        parser.add_argument("--interval", type=int, help="Seconds between cycles.")
        parser.add_argument("--threshold", type=int, help="Seconds a payment must be pending to count as stuck.")
        parser.add_argument(
            "--via-http",
            action="store_true",
            help="Call the manual credit endpoint over HTTP instead of in-process.",
        )

    def handle(self, *args, **options):
        user = None
        if options["user"] is not None:
            User = get_user_model()
            try:
                user = User.objects.get(pk=options["user"])
            except User.DoesNotExist:
                raise CommandError(f"User {options['user']} does not exist")

        threshold = options["threshold"]
        reconciler = StuckPaymentReconciler(
            credit=HttpCreditInvoker() if options["via_http"] else None,
            interval=options["interval"],
            threshold=timedelta(seconds=threshold) if threshold is not None else None,
            on_credited=self._report,
        )

        self.stdout.write(f"Reconciling stuck payments every {reconciler.interval}s")
        reconciler.run(user=user, iterations=1 if options["once"] else None)

    def _report(self, payment, result):
        self.stdout.write(self.style.SUCCESS(
            f"Credited {payment.transaction_reference}: KES {result.get('amount', 0):.2f} "
            f"(new balance {result.get('newBalance', 0):.2f})"
        ))
