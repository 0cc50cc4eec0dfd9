from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "brgy_core.iam"

    def ready(self):
        # Registers the drf-spectacular auth extension
        from brgy_core.iam import openapi  # noqa: F401
