from django.apps import AppConfig


class CustosConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "custos"
    verbose_name = "Custo por talhão"
