import hmac
import json
import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.cache import cache
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt

from chama.models import Chama
from common.utils import paginate_queryset, stuck_payments_cache_key
from payments.callbacks import handle_event
from payments.exceptions import PaymentConfigurationError, PaystackError
from payments.models import Transaction, TRANSACTION_PURPOSE_CHOICES
from payments.paystack import SIGNATURE_HEADER, get_secret_key, initialize_transaction, verify_signature
from payments.reconciler import find_stuck_payments
from payments.services import manual_credit_payment

logger = logging.getLogger(__name__)


# Handle Paystack webhook
@csrf_exempt
def paystack_callback(request):
    logger.info("=== Paystack Callback Received ===")
    if request.method != "POST":
        return HttpResponse("Invalid request method", status=405)

    try:
        secret = get_secret_key()
    except PaymentConfigurationError:
        logger.error("PAYSTACK_SECRET_KEY not configured")
        return HttpResponse("Configuration error", status=500)

    if not verify_signature(request.body, request.headers.get(SIGNATURE_HEADER), secret):
        logger.error("Invalid signature - possible security breach attempt")
        return HttpResponse("Invalid signature", status=401)

    # Past this point the processor always gets a 200 so it does not redeliver.
    try:
        payload = json.loads(request.body.decode("utf-8"))
        logger.info(f"Webhook event: {payload.get('event')}")
        handle_event(payload)
    except Exception as e:
        logger.error(f"Callback error: {e}", exc_info=True)

    return HttpResponse("OK", status=200)


def _has_service_token(request):
    token = settings.PAYMENTS_SERVICE_TOKEN
    auth_header = request.headers.get("Authorization", "")
    if not token or not auth_header.startswith("Bearer "):
        return False
    presented = auth_header[len("Bearer "):]
    return hmac.compare_digest(presented.encode("utf-8", "replace"), token.encode("utf-8"))


@csrf_exempt
def manual_credit(request):
    if request.method != "POST":
        return HttpResponse("Invalid request method", status=405)

    if not (request.user.is_authenticated or _has_service_token(request)):
        return JsonResponse({"success": False, "error": "Unauthorized"}, status=401)

    try:
        body = json.loads(request.body.decode("utf-8") or "{}")
        result = manual_credit_payment(body.get("reference"))
        return JsonResponse(result)
    except Exception as e:
        logger.error(f"Error crediting payment: {e}", exc_info=True)
        error_message = str(e) or "Unknown error occurred"
        return JsonResponse({"success": False, "error": error_message}, status=400)


# Start a Paystack charge from the wallet page
@login_required
def initiate_payment(request):
    if request.method != "POST":
        return HttpResponse("Invalid request method", status=405)

    purpose = request.POST.get("purpose") or "wallet_topup"
    if purpose not in dict(TRANSACTION_PURPOSE_CHOICES):
        return JsonResponse({"success": False, "errorMessage": "Invalid purpose"}, status=400)

    chama = None
    chama_id = request.POST.get("chama_id")
    if chama_id:
        chama = get_object_or_404(Chama, id=chama_id)

    try:
        response = initialize_transaction(
            request.user,
            request.POST.get("email") or request.user.email,
            request.POST.get("amount"),
            purpose=purpose,
            chama=chama,
            phone=request.POST.get("phone"),
        )
    except PaymentConfigurationError as e:
        logger.error(str(e))
        return JsonResponse({"success": False, "errorMessage": "Payments are not configured."}, status=500)
    except PaystackError as e:
        return JsonResponse({"success": False, "errorMessage": str(e)}, status=502)
    except ValueError as e:
        return JsonResponse({"success": False, "errorMessage": str(e)}, status=400)
    return JsonResponse(response)


# List User Transactions
@login_required
def my_transactions(request):
    txs = Transaction.objects.filter(transaction_user=request.user).order_by("-transaction_created_at")
    page = paginate_queryset(txs, request.GET.get("page"))
    data = [
        {
            "reference": tx.transaction_reference,
            "amount": str(tx.transaction_amount),
            "type": tx.transaction_type,
            "purpose": tx.transaction_purpose,
            "status": tx.transaction_status,
            "result_desc": tx.transaction_result_desc,
            "created_at": tx.transaction_created_at.strftime("%Y-%m-%d %H:%M"),
        }
        for tx in page
    ]
    return JsonResponse({
        "transactions": data,
        "page": page.number,
        "num_pages": page.paginator.num_pages,
    })


@login_required
def stuck_payments(request):
    key = stuck_payments_cache_key(request.user.pk)
    data = cache.get(key)
    if data is None:
        data = {
            "stuck_payments": [
                {
                    "reference": tx.transaction_reference,
                    "amount": str(tx.transaction_amount),
                    "created_at": tx.transaction_created_at.isoformat(),
                }
                for tx in find_stuck_payments(request.user)
            ]
        }
        cache.set(key, data, settings.STUCK_PAYMENT_POLL_INTERVAL_SECONDS)
    return JsonResponse(data)
