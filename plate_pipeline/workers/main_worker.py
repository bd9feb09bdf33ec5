import logging
import threading

import uvicorn

from plate_pipeline.core.config import settings
from plate_pipeline.api.main import app, status_board
from plate_pipeline.application.camera_service_runner import build_service
from plate_pipeline.infrastructure.Notification.log_notifier import LogNotifier
from plate_pipeline.monitoring.metrics import start_metrics_server

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


def main():
    start_metrics_server(port=settings.prometheus_port)

    # la API comparte el StatusBoard con el servicio
    status_board.forward = LogNotifier()
    if settings.serve_api:
        threading.Thread(
            target=uvicorn.run,
            kwargs={"app": app, "host": "0.0.0.0", "port": settings.app_port, "log_level": "warning"},
            daemon=True,
        ).start()
        logger.info(f"🌐 API disponible en :{settings.app_port}")

    service = build_service(notifier=status_board)
    service.start()
    logger.info("🚀 Pipeline de placas iniciado.")

    try:
        while not service.stop_event.is_set():
            threading.Event().wait(5)
    except KeyboardInterrupt:
        logger.info("🧠 Deteniendo…")
    finally:
        service.stop()


if __name__ == "__main__":
    main()
