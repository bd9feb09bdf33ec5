import logging
from typing import Optional

from plate_pipeline.application.plate_recognition_service import PlateRecognitionService
from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.notifier import INotifier
from plate_pipeline.domain.Models.send_mode import SendMode
from plate_pipeline.domain.Services.candidate_extractor import CandidateExtractor
from plate_pipeline.domain.Services.confidence_scorer import ConfidenceScorer, ScoringPolicy
from plate_pipeline.domain.Services.decision_pipeline import DecisionPipeline
from plate_pipeline.domain.Services.detection_memory import DetectionMemory
from plate_pipeline.infrastructure.Normalizer.plate_normalizer import PlateNormalizer
from plate_pipeline.infrastructure.Preprocessing.opencv_region_locator import OpenCVPlateRegionLocator

logger = logging.getLogger(__name__)


def build_pipeline(with_region_locator: bool = True) -> DecisionPipeline:
    """Pipeline de decisión configurado desde settings (una instancia por sesión de cámara)."""
    normalizer = PlateNormalizer(validate_charset=settings.validate_charset)
    scorer = ConfidenceScorer(ScoringPolicy.from_settings(settings))
    extractor = CandidateExtractor(normalizer=normalizer, scorer=scorer)

    return DecisionPipeline(
        extractor=extractor,
        memory=DetectionMemory(capacity=settings.max_recent_detections),
        confidence_threshold=settings.confidence_threshold,
        corroboration_count=settings.corroboration_count,
        high_confidence=settings.high_confidence_override,
        roi_expand=(settings.roi_expand_x, settings.roi_expand_y),
        region_locator=OpenCVPlateRegionLocator() if with_region_locator else None,
    )


def build_service(notifier: Optional[INotifier] = None) -> PlateRecognitionService:
    from plate_pipeline.infrastructure.Camera.camera_factory import create_camera_stream
    from plate_pipeline.infrastructure.Database.session import init_db
    from plate_pipeline.infrastructure.Database.site_repository import SqlSiteRepository
    from plate_pipeline.infrastructure.Messaging.factory import create_publisher
    from plate_pipeline.infrastructure.Notification.log_notifier import LogNotifier
    from plate_pipeline.infrastructure.OCR.EasyOCR_OCRReader import EasyOCR_OCRReader

    init_db()
    send_mode = SendMode.parse(settings.send_mode)
    logger.info(f"🎥 Construyendo servicio (cámara={settings.camera_url}, envío={send_mode.value})")

    return PlateRecognitionService(
        camera_stream=create_camera_stream(),
        ocr_reader=EasyOCR_OCRReader(),
        pipeline=build_pipeline(),
        publisher=create_publisher(),
        notifier=notifier or LogNotifier(),
        site_repository=SqlSiteRepository(),
        send_mode=send_mode,
    )
