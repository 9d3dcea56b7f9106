from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('paystack/callback/', views.paystack_callback, name='paystack_callback'),
    path('manual-credit/', views.manual_credit, name='manual_credit'),
    path('initiate/', views.initiate_payment, name='initiate_payment'),
    path('my-transactions/', views.my_transactions, name='my_transactions'),
    path('stuck/', views.stuck_payments, name='stuck_payments'),
]
