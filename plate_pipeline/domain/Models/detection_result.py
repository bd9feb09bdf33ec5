# plate_pipeline/domain/Models/detection_result.py
from dataclasses import dataclass
from typing import Optional
from plate_pipeline.domain.Models.text_line import BoundingBox

@dataclass
class DetectionResult:
    """
    Placa aceptada lista para entregar al transporte.
    """
    event_id: str             # idempotency / tracing (camera:plate:ts)
    plate: str
    confidence: float         # score heurístico del candidato
    observations: int         # veces vista en la memoria de detecciones
    captured_at: float        # timestamp original del frame
    processed_at: float       # timestamp cuando se terminó de procesar
    device_id: str
    site_id: str
    camera_id: Optional[str] = None
    region: Optional[BoundingBox] = None
    image: Optional[bytes] = None      # JPEG ya codificado (según SendMode)
    image_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Convierte a dict serializable (sin bytes de imagen)."""
        return {
            "event_id": self.event_id,
            "plate": self.plate,
            "confidence": self.confidence,
            "observations": self.observations,
            "captured_at": self.captured_at,
            "processed_at": self.processed_at,
            "device_id": self.device_id,
            "site_id": self.site_id,
            "camera_id": self.camera_id,
            "region": self.region.to_tuple() if self.region else None,
            "has_image": self.image is not None,
        }
