import logging
from prometheus_client import Gauge, Counter, start_http_server

logger = logging.getLogger(__name__)

# Frames procesados por tipo de outcome
frames_processed_total = Counter(
    "frames_processed_total",
    "Frames procesados por el pipeline, por outcome",
    ["camera_id", "outcome"]
)

# Frames descartados porque el pipeline estaba ocupado
frames_dropped_total = Counter(
    "frames_dropped_total",
    "Frames descartados por backpressure (pipeline ocupado)",
    ["camera_id"]
)

# Placas aceptadas
plates_accepted_total = Counter(
    "plates_accepted_total",
    "Total de placas aceptadas",
    ["camera_id"]
)

# Fallos de envío
publish_failures_total = Counter(
    "publish_failures_total",
    "Envíos de placas fallidos",
    ["camera_id"]
)

# Latencia OCR
ocr_latency = Gauge(
    "ocr_latency_seconds",
    "Tiempo de OCR por cámara",
    ["camera_id"]
)

# Latencia total pipeline
pipeline_latency = Gauge(
    "pipeline_latency_seconds",
    "Tiempo total de procesamiento de frame",
    ["camera_id"]
)

def start_metrics_server(port: int = 9100):
    """Arranca servidor de métricas Prometheus."""
    start_http_server(port)
    logger.info(f"📊 Prometheus metrics disponible en :{port}")
