import logging
from plate_pipeline.domain.Interfaces.notifier import INotifier

logger = logging.getLogger(__name__)


class LogNotifier(INotifier):
    """Notificador mínimo: todo va al log."""

    def plate_detected(self, plate: str) -> None:
        logger.info("🚗 Placa reconocida: %s", plate)

    def status(self, message: str) -> None:
        logger.info("ℹ️ %s", message)
