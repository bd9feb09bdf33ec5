from abc import ABC, abstractmethod
from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Models.text_line import OcrResult


class RecognitionError(Exception):
    """El motor OCR no pudo procesar el frame."""


class IOCRReader(ABC):
    """
    Motor OCR tratado como caja negra: frame -> líneas de texto con bbox.
    """
    @abstractmethod
    def recognize(self, frame: Frame) -> OcrResult:
        """
        Reconoce el texto del frame completo.
        Lanza RecognitionError si el motor falla.
        """
        pass
