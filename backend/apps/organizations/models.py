"""
Organizations models - multi-tenancy foundation.
"""

from django.db import models

from apps.core.models import TimestampedModel


class Organization(TimestampedModel):
    """
    Tenant boundary for groups, CPLs and user roles.

    Created by super admins only and never deleted; deactivate instead.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Activa"
        INACTIVE = "inactive", "Inactiva"

    name = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
    )

    # WhatsApp sender configuration used by the delivery automation
    whatsapp_api_key = models.CharField(max_length=255, null=True, blank=True)
    whatsapp_phone_number = models.CharField(max_length=32, null=True, blank=True)

    class Meta:
        db_table = "organizations"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE
