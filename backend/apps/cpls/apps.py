"""CPLs app configuration."""

from django.apps import AppConfig


class CplsConfig(AppConfig):
    """Configuration for cpls app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.cpls"
    verbose_name = "CPLs"
