from dataclasses import dataclass
import numpy as np

@dataclass
class Frame:
    """
    Representa un frame capturado desde una cámara.
    """
    data: np.ndarray   # imagen BGR en formato numpy array
    timestamp: float   # momento en que se capturó
    source: str        # identificador de la cámara o URL

    @property
    def image(self) -> np.ndarray:
        """Alias para compatibilidad con librerías que esperan 'image'."""
        return self.data

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) del frame."""
        h, w = self.data.shape[:2]
        return w, h
