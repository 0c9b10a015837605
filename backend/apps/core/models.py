"""
Core models - shared base classes and utilities.
"""

import uuid

from django.conf import settings
from django.db import models


class TimestampedModel(models.Model):
    """
    Abstract base model with a UUID primary key and created_at/updated_at timestamps.

    All business entities should inherit from this or OrganizationScopedModel.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class OrganizationScopedModel(TimestampedModel):
    """
    Abstract base model for content owned by an organization.

    Provides:
    - Nullable organization FK (rows created before multi-tenancy have none)
    - Mandatory creator FK
    - Timestamps from TimestampedModel

    Queries scope by organization; the creator is kept for auditing only.
    """

    organization = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="%(class)s_set",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="%(class)s_created",
        help_text="User who created this record",
    )

    class Meta:
        abstract = True


class ProcessedWebhook(models.Model):
    """Inbound webhook deliveries that were already applied, keyed by provider event id."""

    source = models.CharField(max_length=50)
    event_id = models.CharField(max_length=255)
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "processed_webhooks"
        constraints = [
            models.UniqueConstraint(fields=["source", "event_id"], name="unique_processed_webhook"),
        ]

    def __str__(self) -> str:
        return f"{self.source}:{self.event_id}"
