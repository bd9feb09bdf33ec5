import os
import platform
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from dotenv import load_dotenv


# ==========================================================
# 1) Cargar .env raíz
# ==========================================================
load_dotenv(".env")
DEPLOY_ENV = os.getenv("DEPLOY_ENV", "prod").lower()

# ==========================================================
# 2) Cargar .env del entorno
# ==========================================================
ENV_PATH = f"DevOps/{DEPLOY_ENV}/.env"
load_dotenv(ENV_PATH, override=True)


class Settings(BaseSettings):
    """
    Los nombres de campo coinciden con las variables de entorno
    (sin distinguir mayúsculas), p.ej. CONFIDENCE_THRESHOLD.
    """
    model_config = SettingsConfigDict(
        env_file=ENV_PATH,
        extra="allow"
    )

    # =========================
    #  App
    # =========================
    deploy_env: str = Field("prod")
    app_name: str = Field("plate-pipeline")
    app_env: str = Field("prod")
    app_port: int = Field(8000)
    serve_api: bool = Field(True)

    # =========================
    #  Pipeline de decisión
    # =========================
    confidence_threshold: float = Field(0.7)
    corroboration_count: int = Field(2)
    high_confidence_override: float = Field(0.85)
    max_recent_detections: int = Field(10)

    # =========================
    #  Scoring heurístico
    # =========================
    aspect_ratio_min: float = Field(3.5)
    aspect_ratio_max: float = Field(5.0)
    char_density_min: float = Field(0.05)
    char_density_max: float = Field(0.15)
    aspect_weight: float = Field(0.3)
    aspect_weight_low: float = Field(0.1)
    density_weight: float = Field(0.3)
    density_weight_low: float = Field(0.1)
    baseline_weight: float = Field(0.4)
    missing_box_confidence: float = Field(0.5)

    # =========================
    #  Validación / ROI
    # =========================
    validate_charset: bool = Field(True)
    roi_expand_x: float = Field(0.1)
    roi_expand_y: float = Field(0.2)

    # =========================
    #  Envío
    # =========================
    send_mode: str = Field("full_frame")          # none | full_frame | cropped_plate
    publisher: str = Field("console")             # console | kafka | http
    send_cooldown: float = Field(5.0)             # segundos, 0 = sin cooldown
    jpeg_quality: int = Field(80)
    publish_retry_attempts: int = Field(3)
    publish_retry_base_delay: float = Field(0.5)
    http_endpoint: str = Field("https://admin.campingfriend.co.kr/api/license")
    http_timeout: float = Field(10.0)

    # =========================
    #  Kafka
    # =========================
    kafka_broker: str = Field("kafka:9092")
    kafka_topic_plate: str = Field("plates-detected")
    kafka_delivery_timeout: float = Field(10.0)

    # =========================
    #  Sitio / dispositivo
    # =========================
    site_id_default: str = Field("없음")
    device_id: str = Field(default_factory=platform.node)

    # =========================
    #  Database
    # =========================
    db_url: str = Field("sqlite:///plate_pipeline.db")

    # =========================
    #  Camera
    # =========================
    camera_url: str = Field("0")
    use_fake_cam: bool = Field(False)
    max_fps: float = Field(10.0)

    # =========================
    #  OCR
    # =========================
    ocr_langs: list[str] = Field(default_factory=lambda: ["ko", "en"])
    ocr_gpu: bool = Field(False)

    # =========================
    #  Monitoring
    # =========================
    prometheus_port: int = Field(9100)


settings = Settings()
