# plate_pipeline/infrastructure/Normalizer/plate_normalizer.py
import logging
import re
from typing import Optional
from plate_pipeline.domain.Interfaces.text_normalizer import ITextNormalizer
from plate_pipeline.domain.Services import pattern_catalog as catalog
from plate_pipeline.core.config import settings

logger = logging.getLogger(__name__)


class PlateNormalizer(ITextNormalizer):
    """
    Valida y corrige texto de placas coreanas:
    - Quitar espacios
    - Corregir confusiones típicas del OCR (letra -> dígito)
    - Aceptar solo dígitos ASCII + alfabeto de tipo + sílabas de región
    - Re-match contra el catálogo de formatos
    - Comprobar carácter de tipo y región (placas comerciales)
    Devuelve "" si la placa se rechaza.
    """
    _WS = re.compile(r"\s+")

    CORRECTIONS = str.maketrans({
        "O": "0", "o": "0", "Q": "0", "D": "0",
        "I": "1", "l": "1", "|": "1",
        "B": "8",
        "S": "5",
        "Z": "2",
    })

    _ALLOWED = frozenset("0123456789") | catalog.TYPE_CHARS | catalog.REGION_CHARS

    def __init__(self, validate_charset: Optional[bool] = None):
        self.validate_charset = (
            validate_charset
            if validate_charset is not None
            else bool(getattr(settings, "validate_charset", True))
        )

    def correct(self, text: str) -> str:
        return self._WS.sub("", text or "").translate(self.CORRECTIONS)

    def normalize(self, text: str) -> str:
        if not text:
            return ""

        corrected = self.correct(text)

        # juego de caracteres
        if self.validate_charset and any(c not in self._ALLOWED for c in corrected):
            logger.debug("Rechazada por caracteres fuera de alfabeto: %r", corrected)
            return ""

        shape = catalog.match_shape(corrected)
        if shape is None:
            return ""

        if corrected[shape.type_index] not in catalog.TYPE_CHARS:
            logger.debug("Carácter de tipo inválido en %r", corrected)
            return ""

        if shape.has_region and corrected[:2] not in catalog.REGION_NAMES:
            logger.debug("Región inválida en %r", corrected)
            return ""

        return corrected
