import json
import logging
import threading
import time
from typing import Optional
from datetime import datetime, timezone
from confluent_kafka import Producer, KafkaError
from plate_pipeline.domain.Models.detection_result import DetectionResult
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.core.config import settings

logger = logging.getLogger(__name__)

class KafkaPublisher(IEventPublisher):
    """
    Publica la placa aceptada en Kafka como JSON (sin imagen).
    Espera el callback de entrega con polling activo para no dar por
    publicado un mensaje que el broker nunca confirmó.
    """

    def __init__(self, delivery_timeout: Optional[float] = None, producer_conf: Optional[dict] = None, producer=None):
        base_conf = {
            "bootstrap.servers": settings.kafka_broker,
            "client.id": settings.app_name,
            "enable.idempotence": True,   # evita duplicados en el broker
            "acks": "all",
            "message.send.max.retries": 3,
            "socket.timeout.ms": 30000,
            "request.timeout.ms": 30000,
            "linger.ms": 5,
        }

        if producer_conf:
            base_conf.update(producer_conf)

        self.producer = producer if producer is not None else Producer(base_conf)
        self.topic = settings.kafka_topic_plate
        self.delivery_timeout = (
            delivery_timeout if delivery_timeout is not None else settings.kafka_delivery_timeout
        )

        # métricas internas básicas
        self.metrics = {
            "publish_ok": 0,
            "publish_failed": 0,
            "publish_timeout": 0
        }

    @staticmethod
    def build_event(result: DetectionResult) -> dict:
        return {
            "plate": result.plate,
            "confidence": result.confidence,
            "observations": result.observations,
            "deviceId": result.device_id,
            "siteId": result.site_id,
            "cameraId": result.camera_id,
            "timestamp": datetime.fromtimestamp(result.captured_at, tz=timezone.utc).isoformat(),
            "eventId": result.event_id,
            "region": list(result.region.to_tuple()) if result.region else None,
        }

    # ============================================================
    #  PUBLICAR EVENTO
    # ============================================================
    def publish(self, result: DetectionResult) -> None:
        payload = json.dumps(self.build_event(result), ensure_ascii=False)
        key = result.event_id
        start_time = time.time()
        delivered = {"err": None}
        ev = threading.Event()

        def _cb(err, msg):
            delivered["err"] = err
            ev.set()
            if err is None:
                latency = (time.time() - start_time) * 1000
                logger.info("✅ Kafka delivered topic=%s partition=%s offset=%s latency=%.1fms",
                            msg.topic(), msg.partition(), msg.offset(), latency)

        self.producer.produce(
            topic=self.topic,
            key=key,
            value=payload.encode("utf-8"),
            callback=_cb,
        )

        # ------------------------------
        # Polling activo mientras se espera el callback
        # ------------------------------
        deadline = time.time() + self.delivery_timeout
        while not ev.is_set() and time.time() < deadline:
            self.producer.poll(0.1)

        if not ev.is_set():
            logger.warning("⚠️ Timeout esperando confirmación de Kafka (%.1fs)", self.delivery_timeout)
            self.metrics["publish_timeout"] += 1
            raise TimeoutError("Kafka delivery timeout")

        if delivered["err"] is not None:
            err = delivered["err"]
            msg_err = err.str() if isinstance(err, KafkaError) else str(err)
            self.metrics["publish_failed"] += 1
            raise RuntimeError(f"Kafka delivery failed: {msg_err}")

        self.metrics["publish_ok"] += 1
        logger.debug("Evento publicado en Kafka topic=%s key=%s payload=%s", self.topic, key, payload)

    # ============================================================
    #  CIERRE
    # ============================================================
    def close(self, timeout: float = 5.0) -> None:
        try:
            self.producer.flush(timeout)
            logger.info("Kafka producer flushed/closed. Métricas finales: %s", self.metrics)
        except Exception:
            logger.exception("Error al flush/close del Kafka producer")
