import json
import logging
from typing import Optional

import requests

from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.domain.Models.detection_result import DetectionResult

logger = logging.getLogger(__name__)


class HttpPublisher(IEventPublisher):
    """
    Envía la placa al servidor como multipart/form-data:
    - parte "data": JSON con licensePlate, timestamp (ms), deviceId, confidence, siteId
    - parte "image": JPEG opcional (frame completo o recorte)
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint or settings.http_endpoint
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.session = session or requests.Session()

    def build_payload(self, result: DetectionResult) -> dict:
        return {
            "licensePlate": result.plate,
            "timestamp": int(result.captured_at * 1000),
            "deviceId": result.device_id,
            # el servidor espera aquí el nº de observaciones
            "confidence": result.observations,
            "siteId": result.site_id,
        }

    def publish(self, result: DetectionResult) -> None:
        if not result.plate:
            raise ValueError("DetectionResult sin texto de placa")

        data = {"data": json.dumps(self.build_payload(result), ensure_ascii=False)}
        files = None
        if result.image is not None:
            name = result.image_name or f"{result.plate}.jpg"
            files = {"image": (name, result.image, "image/jpeg")}

        response = self.session.post(self.endpoint, data=data, files=files, timeout=self.timeout)
        if not response.ok:
            raise RuntimeError(f"Servidor respondió {response.status_code}")

        logger.info("✅ Placa %s enviada a %s", result.plate, self.endpoint)

    def close(self) -> None:
        self.session.close()
