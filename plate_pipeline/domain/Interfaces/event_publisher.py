from abc import ABC, abstractmethod
from plate_pipeline.domain.Models.detection_result import DetectionResult

class IEventPublisher(ABC):
    """
    Publicador de placas aceptadas a sistemas externos (Kafka, HTTP...).
    """
    @abstractmethod
    def publish(self, result: DetectionResult) -> None:
        """Entrega un DetectionResult. Lanza excepción si falla."""
        pass

    def close(self) -> None:
        """Libera conexiones / vacía buffers pendientes. Por defecto no hace nada."""
        pass
