from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.cache import cache
from django.http import JsonResponse

from common.utils import wallet_cache_key
from wallet.models import Wallet, WalletTransaction

WALLET_CACHE_TIMEOUT = 60


def _wallet_payload(user):
    wallet = Wallet.objects.filter(wallet_user=user).first()
    recent = WalletTransaction.objects.filter(wallet_transaction_user=user)[:20]
    return {
        "balance": float(wallet.wallet_balance) if wallet else 0.0,
        "currency": wallet.wallet_currency if wallet else settings.DEFAULT_CURRENCY,
        "transactions": [
            {
                "type": tx.wallet_transaction_type,
                "amount": float(tx.wallet_transaction_amount),
                "description": tx.wallet_transaction_description,
                "status": tx.wallet_transaction_status,
                "reference": tx.wallet_transaction_reference,
                "payment_method": tx.wallet_transaction_payment_method,
                "currency": tx.wallet_transaction_currency,
                "created_at": tx.wallet_transaction_created_at.strftime("%Y-%m-%d %H:%M"),
            }
            for tx in recent
        ],
    }


@login_required
def wallet_summary(request):
    key = wallet_cache_key(request.user.pk)
    data = cache.get(key)
    if data is None:
        data = _wallet_payload(request.user)
        cache.set(key, data, WALLET_CACHE_TIMEOUT)
    return JsonResponse(data)
