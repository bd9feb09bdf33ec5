from typing import Optional, Protocol
import numpy as np
from plate_pipeline.domain.Models.text_line import BoundingBox

class IPlateRegionLocator(Protocol):
    """
    Preprocesado de imagen como caja negra: intenta ubicar la placa
    en el frame sin ayuda del OCR.
    """
    def locate_plate_region(self, image: np.ndarray) -> Optional[BoundingBox]: ...
