"""
CPL models - scheduled campaign content.
"""

from django.db import models

from apps.core.models import OrganizationScopedModel
from apps.cpls.constants import DiaSemana


class Cpl(OrganizationScopedModel):
    """
    One piece of campaign content sent on a weekday at a time of day.

    Content columns belong to a type in tipo_cpl and are NULL when their
    type is not selected, so the delivery automation never sends stale data.
    """

    fecha_inicio = models.DateField()
    fecha_termino = models.DateField()
    dia_semana = models.CharField(max_length=20, choices=DiaSemana.choices)
    hora = models.TimeField()
    tipo_cpl = models.JSONField(default=list, help_text="Selected types: texto, video, imagen, audio")

    # texto
    mensaje_x_dia = models.TextField(null=True, blank=True)
    # video
    youtube_url = models.URLField(max_length=500, null=True, blank=True)
    texto_video = models.TextField(null=True, blank=True)
    # imagen
    imagen_url = models.URLField(max_length=1000, null=True, blank=True)
    imagen_texto = models.TextField(null=True, blank=True)
    # audio
    audio_url = models.URLField(max_length=1000, null=True, blank=True)
    audio_texto = models.TextField(null=True, blank=True)

    destinatario_persona_grupo = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="id_grupo of the recipient group",
    )

    class Meta:
        db_table = "cpls"
        ordering = ["-created_at"]
        verbose_name = "CPL"
        indexes = [
            models.Index(fields=["organization", "-created_at"], name="cpl_org_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.dia_semana} {self.hora:%H:%M} ({', '.join(self.tipo_cpl)})"
