from django.apps import AppConfig


class FidelmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fidelman"
    verbose_name = "Fidelman - Loyalty Orders & Points"
