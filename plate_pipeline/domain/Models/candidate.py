from dataclasses import dataclass


@dataclass(frozen=True)
class Candidate:
    """
    Placa candidata de un frame, antes de la decisión temporal.
    """
    text: str          # placa ya validada/corregida
    confidence: float  # score heurístico en [0, 1]
