"""Contact app configuration."""

from django.apps import AppConfig


class ContactConfig(AppConfig):
    """Configuration for contact app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.contact"
