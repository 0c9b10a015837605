"""
CPL content types and the columns each one owns.
"""

from django.db import models


class TipoCpl(models.TextChoices):
    TEXTO = "texto", "Texto"
    VIDEO = "video", "Video"
    IMAGEN = "imagen", "Imagen"
    AUDIO = "audio", "Audio"


class DiaSemana(models.TextChoices):
    LUNES = "Lunes"
    MARTES = "Martes"
    MIERCOLES = "Miércoles"
    JUEVES = "Jueves"
    VIERNES = "Viernes"
    SABADO = "Sábado"
    DOMINGO = "Domingo"


# Columns written only when their type is selected; NULL otherwise
CONTENT_FIELDS: dict[str, tuple[str, ...]] = {
    TipoCpl.TEXTO: ("mensaje_x_dia",),
    TipoCpl.VIDEO: ("youtube_url", "texto_video"),
    TipoCpl.IMAGEN: ("imagen_url", "imagen_texto"),
    TipoCpl.AUDIO: ("audio_url", "audio_texto"),
}
