from itertools import cycle
from typing import Iterable, Optional
from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult, TextLine
from plate_pipeline.domain.Interfaces.ocr_reader import IOCRReader, RecognitionError

class DummyOCRReader(IOCRReader):
    """
    Implementación dummy que repite en bucle una lista fija de resultados.
    Un elemento que sea una excepción se lanza como RecognitionError.
    """

    def __init__(self, results: Optional[Iterable] = None):
        if results is None:
            results = [OcrResult.from_lines([
                TextLine(text="12가3456", box=BoundingBox(100, 200, 200, 50)),
            ])]
        self._results = cycle(list(results))

    def recognize(self, frame: Frame) -> OcrResult:
        result = next(self._results)
        if isinstance(result, Exception):
            raise RecognitionError(str(result)) from result
        return result
