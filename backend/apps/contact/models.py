"""
Contact models - public intake of prospective customers.
"""

from django.db import models

from apps.core.models import TimestampedModel


class ContactRequest(TimestampedModel):
    """A message left through the public contact form. Append-only."""

    class Estado:
        PENDIENTE = "pendiente"

    nombre = models.CharField(max_length=255)
    correo = models.EmailField()
    whatsapp = models.CharField(max_length=32)
    mensaje = models.TextField()
    estado = models.CharField(max_length=30, default=Estado.PENDIENTE)

    class Meta:
        db_table = "contact_requests"
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.nombre} <{self.correo}>"
