# plate_pipeline/domain/Services/candidate_extractor.py
from __future__ import annotations
import logging
import re
from typing import Dict, List, Optional, Tuple

from plate_pipeline.domain.Interfaces.text_normalizer import ITextNormalizer
from plate_pipeline.domain.Models.candidate import Candidate
from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult
from plate_pipeline.domain.Services import pattern_catalog as catalog
from plate_pipeline.domain.Services.confidence_scorer import ConfidenceScorer

logger = logging.getLogger(__name__)

_WS = re.compile(r"\s+")


class CandidateExtractor:
    """
    Busca placas en la salida del OCR.

    1) Escaneo de página (texto crudo y sin espacios): sólo indica que hay
       algún formato presente. Si el OCR no trae líneas, esos matches se
       validan y se registran con la confianza por defecto.
    2) Escaneo por línea: cada match se puntúa con la geometría de su línea
       y se pasa por el validador.
    3) Dedup por texto, conservando la confianza máxima.
    """

    def __init__(self, normalizer: ITextNormalizer, scorer: Optional[ConfidenceScorer] = None):
        self.normalizer = normalizer
        self.scorer = scorer or ConfidenceScorer()

    # ---------------------------------------------------------
    #  API PRINCIPAL
    # ---------------------------------------------------------
    def extract(self, ocr: Optional[OcrResult]) -> List[Candidate]:
        if ocr is None:
            return []

        best: Dict[str, float] = {}

        page_matches = self.scan_text(ocr.text)

        for line in ocr.lines:
            line_text = _WS.sub("", line.text or "")
            if not line_text:
                continue

            matches = catalog.find_all(line_text)
            if not matches:
                continue

            confidence = self.scorer.score(line)
            for _shape, raw in matches:
                plate = self.normalizer.normalize(raw)
                if plate:
                    self._keep_max(best, plate, confidence)

        if not ocr.has_lines and page_matches:
            fallback = self.scorer.policy.missing_box
            for raw in page_matches:
                plate = self.normalizer.normalize(raw)
                if plate:
                    self._keep_max(best, plate, fallback)

        logger.debug("page_matches=%d candidates=%d", len(page_matches), len(best))
        return [Candidate(text=t, confidence=c) for t, c in best.items()]

    def scan_text(self, text: str) -> List[str]:
        """Matches únicos sobre el texto completo, crudo y sin espacios."""
        if not text:
            return []
        found: List[str] = []
        for source in (text, _WS.sub("", text)):
            for _shape, raw in catalog.find_all(source):
                if raw not in found:
                    found.append(raw)
        return found

    def best_region(self, ocr: Optional[OcrResult]) -> Optional[Tuple[BoundingBox, float]]:
        """
        Bbox de la línea con mejor score entre las que encajan con algún
        formato. Las líneas sin bbox no cuentan.
        """
        if ocr is None:
            return None

        best_box: Optional[BoundingBox] = None
        best_score = 0.0
        for line in ocr.lines:
            if line.box is None:
                continue
            if not catalog.matches_any(_WS.sub("", line.text or "")):
                continue
            score = self.scorer.score(line)
            if score > best_score:
                best_score = score
                best_box = line.box

        return (best_box, best_score) if best_box is not None else None

    # ---------------------------------------------------------
    #  HELPERS
    # ---------------------------------------------------------
    @staticmethod
    def _keep_max(best: Dict[str, float], plate: str, confidence: float) -> None:
        if confidence > best.get(plate, -1.0):
            best[plate] = confidence
