from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    return JsonResponse({"status": "healthy", "service": "chamawallet"})


urlpatterns = [
    path('admin/', admin.site.urls),
    path('', health_check, name='health_check'),
    path('chama/', include('chama.urls')),
    path('api/wallet/', include('wallet.urls')),
    path('api/payments/', include('payments.urls')),
]
