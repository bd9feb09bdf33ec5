import threading
import time
from typing import Optional
from plate_pipeline.domain.Interfaces.notifier import INotifier


class StatusBoard(INotifier):
    """
    Guarda en memoria la última placa y el último mensaje de estado
    para mostrarlos (API /status). Opcionalmente reenvía a otro notificador.
    """

    def __init__(self, forward: Optional[INotifier] = None):
        self.forward = forward
        self._lock = threading.Lock()
        self._last_plate: Optional[str] = None
        self._last_plate_at: Optional[float] = None
        self._last_status: Optional[str] = None

    def plate_detected(self, plate: str) -> None:
        with self._lock:
            self._last_plate = plate
            self._last_plate_at = time.time()
        if self.forward is not None:
            self.forward.plate_detected(plate)

    def status(self, message: str) -> None:
        with self._lock:
            self._last_status = message
        if self.forward is not None:
            self.forward.status(message)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "last_plate": self._last_plate,
                "last_plate_at": self._last_plate_at,
                "last_status": self._last_status,
            }
