# plate_pipeline/domain/Services/confidence_scorer.py
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

from plate_pipeline.domain.Models.text_line import TextLine


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Bandas y pesos del score heurístico.
    Cada componente aporta su peso alto dentro de banda y el bajo fuera.
    """
    aspect_min: float = 3.5
    aspect_max: float = 5.0
    density_min: float = 0.05
    density_max: float = 0.15
    aspect_weight: float = 0.3
    aspect_weight_low: float = 0.1
    density_weight: float = 0.3
    density_weight_low: float = 0.1
    baseline_weight: float = 0.4
    missing_box: float = 0.5

    @classmethod
    def from_settings(cls, s) -> "ScoringPolicy":
        return cls(
            aspect_min=s.aspect_ratio_min,
            aspect_max=s.aspect_ratio_max,
            density_min=s.char_density_min,
            density_max=s.char_density_max,
            aspect_weight=s.aspect_weight,
            aspect_weight_low=s.aspect_weight_low,
            density_weight=s.density_weight,
            density_weight_low=s.density_weight_low,
            baseline_weight=s.baseline_weight,
            missing_box=s.missing_box_confidence,
        )


class ConfidenceScorer:
    """
    El OCR no entrega confianza por línea, así que se estima con la
    geometría: proporción del bbox (placa coreana ~4.3:1) y densidad de
    caracteres (espaciado uniforme).
    """
    _WS = re.compile(r"\s+")

    def __init__(self, policy: Optional[ScoringPolicy] = None):
        if policy is None:
            from plate_pipeline.core.config import settings
            policy = ScoringPolicy.from_settings(settings)
        self.policy = policy

    def score(self, line: TextLine) -> float:
        p = self.policy
        box = line.box
        if box is None:
            return p.missing_box

        text_length = len(self._WS.sub("", line.text or ""))

        aspect_ok = False
        if box.height > 0:
            aspect_ok = p.aspect_min <= box.width / box.height <= p.aspect_max

        density_ok = False
        if box.width > 0:
            density_ok = p.density_min <= text_length / box.width <= p.density_max

        total = (
            (p.aspect_weight if aspect_ok else p.aspect_weight_low)
            + (p.density_weight if density_ok else p.density_weight_low)
            + p.baseline_weight
        )
        return min(1.0, max(0.0, total))
