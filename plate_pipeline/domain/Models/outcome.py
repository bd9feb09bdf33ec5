# plate_pipeline/domain/Models/outcome.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from plate_pipeline.domain.Models.text_line import BoundingBox


class OutcomeKind(str, Enum):
    NO_DETECTION = "no_detection"
    LOW_CONFIDENCE = "low_confidence"
    DUPLICATE_SUPPRESSED = "duplicate_suppressed"
    INSUFFICIENT_CORROBORATION = "insufficient_corroboration"
    ACCEPTED = "accepted"
    RECOGNITION_FAILED = "recognition_failed"


@dataclass(frozen=True)
class NoDetection:
    kind = OutcomeKind.NO_DETECTION

    def describe(self) -> str:
        return "Sin placa en el frame"


@dataclass(frozen=True)
class LowConfidence:
    plate: str
    confidence: float
    kind = OutcomeKind.LOW_CONFIDENCE

    def describe(self) -> str:
        return f"Confianza insuficiente: {self.plate} ({self.confidence:.2f})"


@dataclass(frozen=True)
class DuplicateSuppressed:
    plate: str
    confidence: float
    kind = OutcomeKind.DUPLICATE_SUPPRESSED

    def describe(self) -> str:
        return f"Placa repetida, ignorada: {self.plate}"


@dataclass(frozen=True)
class InsufficientCorroboration:
    plate: str
    confidence: float
    observations: int
    kind = OutcomeKind.INSUFFICIENT_CORROBORATION

    def describe(self) -> str:
        return (
            f"Esperando confirmación: {self.plate} "
            f"(conteo={self.observations}, confianza={self.confidence:.2f})"
        )


@dataclass(frozen=True)
class Accepted:
    plate: str
    confidence: float
    observations: int
    accepted_at: float
    region: Optional[BoundingBox] = None
    kind = OutcomeKind.ACCEPTED

    def describe(self) -> str:
        return f"Placa reconocida: {self.plate}"


@dataclass(frozen=True)
class RecognitionFailed:
    error: str
    kind = OutcomeKind.RECOGNITION_FAILED

    def describe(self) -> str:
        return f"Fallo de reconocimiento: {self.error}"


DetectionOutcome = Union[
    NoDetection,
    LowConfidence,
    DuplicateSuppressed,
    InsufficientCorroboration,
    Accepted,
    RecognitionFailed,
]
