"""Grupos app configuration."""

from django.apps import AppConfig


class GruposConfig(AppConfig):
    """Configuration for grupos app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.grupos"
