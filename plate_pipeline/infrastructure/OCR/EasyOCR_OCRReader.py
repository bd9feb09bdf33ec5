import logging
import easyocr
from typing import List, Optional
from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult, TextLine
from plate_pipeline.domain.Interfaces.ocr_reader import IOCRReader, RecognitionError
from plate_pipeline.core.config import settings

logger = logging.getLogger(__name__)


class EasyOCR_OCRReader(IOCRReader):
    """
    Implementación usando EasyOCR sobre el frame completo:
    - Cada detección de readtext se convierte en una TextLine
    - El polígono de EasyOCR se reduce a un bbox alineado a ejes
    - Cualquier fallo del motor se expone como RecognitionError
    """
    def __init__(self, langs: Optional[List[str]] = None, gpu: Optional[bool] = None):
        self.langs = langs or list(settings.ocr_langs)
        self.gpu = settings.ocr_gpu if gpu is None else gpu
        self.reader = easyocr.Reader(self.langs, gpu=self.gpu)

    def recognize(self, frame: Frame) -> OcrResult:
        lines = []
        try:
            results = self.reader.readtext(frame.image, detail=1, paragraph=False)
            for points, text, _conf in results or []:
                if not text:
                    continue
                lines.append(TextLine(text=str(text).strip(), box=self._to_box(points)))
        except Exception as e:
            raise RecognitionError(f"EasyOCR falló: {e}") from e

        return OcrResult.from_lines(lines)

    @staticmethod
    def _to_box(points) -> Optional[BoundingBox]:
        try:
            xs = [int(round(p[0])) for p in points]
            ys = [int(round(p[1])) for p in points]
        except (TypeError, ValueError, IndexError):
            return None
        if not xs or not ys:
            return None
        return BoundingBox.from_corners(max(0, min(xs)), max(0, min(ys)), max(xs), max(ys))
