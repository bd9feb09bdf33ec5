from abc import ABC, abstractmethod
from typing import Optional
from plate_pipeline.domain.Models.frame import Frame

class ICameraStream(ABC):
    """
    Abstracción de un stream de cámara.
    """
    @abstractmethod
    def connect(self) -> None:
        """Conecta al stream de video."""
        pass

    @abstractmethod
    def read_frame(self, timeout: float = 1.0) -> Optional[Frame]:
        """Lee un frame del stream. Devuelve None si falla o vence el timeout."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Cierra la conexión al stream."""
        pass
