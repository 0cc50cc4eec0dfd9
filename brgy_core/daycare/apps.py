from django.apps import AppConfig


class DaycareConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "brgy_core.daycare"
