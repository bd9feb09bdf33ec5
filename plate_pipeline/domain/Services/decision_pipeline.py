# plate_pipeline/domain/Services/decision_pipeline.py
from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import numpy as np

from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.plate_region_locator import IPlateRegionLocator
from plate_pipeline.domain.Models.candidate import Candidate
from plate_pipeline.domain.Models.outcome import (
    Accepted,
    DetectionOutcome,
    DuplicateSuppressed,
    InsufficientCorroboration,
    LowConfidence,
    NoDetection,
    RecognitionFailed,
)
from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult
from plate_pipeline.domain.Services.candidate_extractor import CandidateExtractor
from plate_pipeline.domain.Services.detection_memory import DetectionMemory

logger = logging.getLogger(__name__)


@dataclass
class PipelineState:
    last_accepted_plate: str = ""
    last_accepted_time: float = 0.0


class DecisionPipeline:
    """
    Decide, frame a frame, qué placa se acepta.

    extract -> mejor candidato -> umbral de confianza -> repetida?
    -> memoria de observaciones -> corroboración -> Accepted + ROI

    Todo resultado "negativo" es un outcome normal, nunca una excepción.
    El estado (memoria + última placa) pertenece a esta instancia; un lock
    interno garantiza acceso exclusivo si se invoca desde varios hilos.
    """

    def __init__(
        self,
        extractor: CandidateExtractor,
        memory: Optional[DetectionMemory] = None,
        state: Optional[PipelineState] = None,
        confidence_threshold: Optional[float] = None,
        corroboration_count: Optional[int] = None,
        high_confidence: Optional[float] = None,
        roi_expand: Optional[tuple[float, float]] = None,
        region_locator: Optional[IPlateRegionLocator] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.extractor = extractor
        self.memory = memory if memory is not None else DetectionMemory()
        self.state = state if state is not None else PipelineState()

        self.confidence_threshold = (
            confidence_threshold if confidence_threshold is not None
            else float(settings.confidence_threshold)
        )
        self.corroboration_count = (
            corroboration_count if corroboration_count is not None
            else int(settings.corroboration_count)
        )
        self.high_confidence = (
            high_confidence if high_confidence is not None
            else float(settings.high_confidence_override)
        )
        self.roi_expand = roi_expand or (settings.roi_expand_x, settings.roi_expand_y)
        self.region_locator = region_locator
        self.clock = clock

        self._lock = threading.Lock()

    # ---------------------------------------------------------
    #  API PRINCIPAL
    # ---------------------------------------------------------
    def process(self, ocr: Optional[OcrResult], image: Optional[np.ndarray] = None) -> DetectionOutcome:
        """Procesa el resultado OCR de un frame completo."""
        candidates = self.extractor.extract(ocr)
        outcome = self.decide(candidates)

        if isinstance(outcome, Accepted):
            region = self._region_of_interest(ocr, image)
            if region is not None:
                outcome = Accepted(
                    plate=outcome.plate,
                    confidence=outcome.confidence,
                    observations=outcome.observations,
                    accepted_at=outcome.accepted_at,
                    region=region,
                )
        return outcome

    def decide(self, candidates: Iterable[Candidate], now: Optional[float] = None) -> DetectionOutcome:
        candidates = list(candidates)
        if not candidates:
            return NoDetection()

        # empate de confianza -> el string más largo (más específico)
        best = max(candidates, key=lambda c: (c.confidence, len(c.text)))
        plate, confidence = best.text, best.confidence

        if confidence < self.confidence_threshold:
            logger.debug("Confianza baja, ignorada: %s (%.2f)", plate, confidence)
            return LowConfidence(plate=plate, confidence=confidence)

        with self._lock:
            if plate == self.state.last_accepted_plate:
                logger.debug("Placa repetida, ignorada: %s", plate)
                return DuplicateSuppressed(plate=plate, confidence=confidence)

            observations = self.memory.increment(plate)

            if observations >= self.corroboration_count or confidence > self.high_confidence:
                accepted_at = now if now is not None else self.clock()
                self.state.last_accepted_plate = plate
                self.state.last_accepted_time = accepted_at
                logger.info("Placa aceptada: %s (confianza=%.2f, conteo=%d)", plate, confidence, observations)
                return Accepted(
                    plate=plate,
                    confidence=confidence,
                    observations=observations,
                    accepted_at=accepted_at,
                )

        logger.debug("Sin corroboración: %s (conteo=%d, confianza=%.2f)", plate, observations, confidence)
        return InsufficientCorroboration(plate=plate, confidence=confidence, observations=observations)

    def recognition_failed(self, error: object) -> RecognitionFailed:
        return RecognitionFailed(error=str(error) or type(error).__name__)

    def reset(self) -> None:
        """Reinicio de sesión: borra memoria y última placa."""
        with self._lock:
            self.memory.clear()
            self.state.last_accepted_plate = ""
            self.state.last_accepted_time = 0.0

    # ---------------------------------------------------------
    #  HELPERS
    # ---------------------------------------------------------
    def _region_of_interest(self, ocr: Optional[OcrResult], image: Optional[np.ndarray]) -> Optional[BoundingBox]:
        found = self.extractor.best_region(ocr)
        if found is not None:
            box, _score = found
            fx, fy = self.roi_expand
            return box.expanded(fx, fy)

        if self.region_locator is not None and image is not None:
            try:
                return self.region_locator.locate_plate_region(image)
            except Exception:
                logger.exception("locate_plate_region falló; sin región")
        return None
