from django.apps import AppConfig


class ChamaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'chama'
