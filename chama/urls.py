from django.urls import path
from chama import views

app_name = 'chama'

urlpatterns = [
    path('join/', views.join_chama, name='join_chama'),
]
