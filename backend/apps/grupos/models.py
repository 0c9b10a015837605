"""
Grupos models - WhatsApp groups provisioned by the external automation.
"""

from django.db import models

from apps.core.models import OrganizationScopedModel


class Grupo(OrganizationScopedModel):
    """
    A named list of WhatsApp numbers turned into a messaging group.

    Lifecycle:
        Created with estado "Creando..." and no id_grupo. Moves to "Creado"
        with the external JID once provisioning succeeds; there is no way
        back. Any other estado value is shown as-is.
    """

    class Estado:
        CREANDO = "Creando..."
        CREADO = "Creado"

    nombre = models.CharField(max_length=255)
    id_grupo = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        db_index=True,
        help_text="External group identifier (JID)",
    )
    estado = models.CharField(max_length=50, default=Estado.CREANDO)
    numeros_whatsapp = models.JSONField(default=list, help_text="Phone numbers, in entry order")

    class Meta:
        db_table = "grupos"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["organization", "-created_at"], name="grupo_org_created_idx"),
        ]

    def __str__(self) -> str:
        return self.nombre

    @property
    def is_pending(self) -> bool:
        return self.estado == self.Estado.CREANDO
