# plate_pipeline/application/plate_recognition_service.py
import logging
import time
import threading
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import cv2

from plate_pipeline.monitoring.metrics import (
    frames_processed_total, frames_dropped_total, plates_accepted_total,
    publish_failures_total, ocr_latency, pipeline_latency
)

from plate_pipeline.domain.Models.detection_result import DetectionResult
from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Models.outcome import Accepted, DetectionOutcome, NoDetection
from plate_pipeline.domain.Models.send_mode import SendMode
from plate_pipeline.domain.Interfaces.camera_stream import ICameraStream
from plate_pipeline.domain.Interfaces.ocr_reader import IOCRReader, RecognitionError
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.domain.Interfaces.notifier import INotifier
from plate_pipeline.domain.Interfaces.site_repository import ISiteRepository
from plate_pipeline.domain.Services.decision_pipeline import DecisionPipeline
from plate_pipeline.core.config import settings

logger = logging.getLogger(__name__)


class PlateRecognitionService:
    """
    Bucle de cámara alrededor del DecisionPipeline.

    - Un único frame en vuelo: si llega otro mientras se procesa, se
      descarta (nunca se encola) y se queda el más reciente que venga después.
    - El envío va por una cola y un hilo propios; su resultado sólo se
      refleja como texto de estado, nunca vuelve al pipeline.
    """

    def __init__(
        self,
        camera_stream: ICameraStream,
        ocr_reader: IOCRReader,
        pipeline: DecisionPipeline,
        publisher: IEventPublisher,
        notifier: INotifier,
        site_repository: ISiteRepository,
        send_mode: SendMode | str | None = None,
        device_id: Optional[str] = None,
        max_fps: Optional[float] = None,
        send_cooldown: Optional[float] = None,
        jpeg_quality: Optional[int] = None,
        clock=time.time,
    ):
        self.camera_stream = camera_stream
        self.ocr_reader = ocr_reader
        self.pipeline = pipeline
        self.publisher = publisher
        self.notifier = notifier
        self.site_repository = site_repository

        self.send_mode = SendMode.parse(send_mode if send_mode is not None else settings.send_mode)
        self.device_id = device_id or settings.device_id
        self.max_fps = max_fps or settings.max_fps
        self.frame_interval = 1.0 / self.max_fps
        self.send_cooldown = settings.send_cooldown if send_cooldown is None else send_cooldown
        self.jpeg_quality = jpeg_quality or settings.jpeg_quality
        self.clock = clock

        self.camera_id = getattr(camera_stream, "camera_id", None) or "default"

        self.stop_event = threading.Event()
        self._busy = threading.Lock()
        self._last_sent_time = 0.0

        self.publish_queue: queue.Queue = queue.Queue(maxsize=50)
        self.executor: ThreadPoolExecutor | None = None

        self.capture_thread: threading.Thread | None = None
        self.publish_thread: threading.Thread | None = None

    # ---------------------------------------------------------
    # START / STOP
    # ---------------------------------------------------------
    def start(self):
        logger.info(f"Iniciando cámara {self.camera_id} (modo envío={self.send_mode.value})")

        self.stop_event.clear()
        self.camera_stream.connect()

        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"proc-{self.camera_id}")

        self.capture_thread = threading.Thread(
            target=self._capture_loop,
            name=f"capture-{self.camera_id}",
            daemon=True,
        )
        self.capture_thread.start()

        self.publish_thread = threading.Thread(
            target=self._publish_loop,
            name=f"publish-{self.camera_id}",
            daemon=True,
        )
        self.publish_thread.start()

    def stop(self):
        logger.info(f"Deteniendo cámara {self.camera_id}")

        self.stop_event.set()
        try:
            # Sentinela para publish_loop
            self.publish_queue.put_nowait(None)
        except queue.Full:
            pass

        if self.capture_thread:
            self.capture_thread.join(timeout=2)
        if self.publish_thread:
            self.publish_thread.join(timeout=2)

        if self.executor:
            self.executor.shutdown(wait=True, cancel_futures=True)
            self.executor = None

        # una tarea cancelada nunca llega a su finally
        if self._busy.locked():
            self._busy.release()

        try:
            self.publisher.close()
        except Exception:
            logger.exception("Error cerrando publisher")

        try:
            self.camera_stream.disconnect()
        except Exception:
            logger.exception("Error desconectando cámara")

    # ---------------------------------------------------------
    # CAPTURE LOOP
    # ---------------------------------------------------------
    def _capture_loop(self):
        last_frame_time = 0.0

        while not self.stop_event.is_set():
            now = time.perf_counter()
            if now - last_frame_time < self.frame_interval:
                time.sleep(0.001)
                continue

            frame = self.camera_stream.read_frame(timeout=1.0)
            last_frame_time = now

            if frame is None:
                time.sleep(0.1)
                continue

            self.submit(frame)

    def submit(self, frame: Frame) -> bool:
        """
        Entrega un frame al worker si está libre.
        Devuelve False si se descartó por estar ocupado.
        """
        if self.executor is None:
            raise RuntimeError("Servicio no iniciado")

        if not self._busy.acquire(blocking=False):
            frames_dropped_total.labels(camera_id=self.camera_id).inc()
            return False

        try:
            self.executor.submit(self._process_and_release, frame)
        except RuntimeError:
            # executor cerrado durante stop()
            self._busy.release()
            return False
        return True

    def _process_and_release(self, frame: Frame) -> None:
        try:
            self.handle_frame(frame)
        except Exception:
            logger.exception(f"[{self.camera_id}] Error procesando frame")
        finally:
            self._busy.release()

    # ---------------------------------------------------------
    # PROCESSING (por frame)
    # ---------------------------------------------------------
    def handle_frame(self, frame: Frame) -> DetectionOutcome:
        t0 = time.perf_counter()

        try:
            ocr = self.ocr_reader.recognize(frame)
        except RecognitionError as e:
            logger.warning(f"[{self.camera_id}] Reconocimiento fallido: {e}")
            outcome = self.pipeline.recognition_failed(e)
        else:
            ocr_latency.labels(camera_id=self.camera_id).set(time.perf_counter() - t0)
            outcome = self.pipeline.process(ocr, image=frame.data)

        frames_processed_total.labels(camera_id=self.camera_id, outcome=outcome.kind.value).inc()
        self._notify(outcome)

        if isinstance(outcome, Accepted):
            plates_accepted_total.labels(camera_id=self.camera_id).inc()
            self._dispatch(outcome, frame)

        pipeline_latency.labels(camera_id=self.camera_id).set(time.perf_counter() - t0)
        return outcome

    def _notify(self, outcome: DetectionOutcome) -> None:
        try:
            if isinstance(outcome, Accepted):
                self.notifier.plate_detected(outcome.plate)
            elif not isinstance(outcome, NoDetection):
                self.notifier.status(outcome.describe())
        except Exception:
            logger.exception(f"[{self.camera_id}] Notificador falló")

    def _dispatch(self, outcome: Accepted, frame: Frame) -> None:
        now = self.clock()
        if self.send_cooldown > 0 and now - self._last_sent_time < self.send_cooldown:
            logger.debug(f"[{self.camera_id}] Cooldown de envío activo, no se envía {outcome.plate}")
            return
        self._last_sent_time = now

        event = self.build_result(outcome, frame)
        try:
            self.publish_queue.put_nowait(event)
        except queue.Full:
            logger.warning(f"[{self.camera_id}] publish_queue llena, descartando evento.")

    # ---------------------------------------------------------
    # EVENT FACTORY
    # ---------------------------------------------------------
    def build_result(self, outcome: Accepted, frame: Frame) -> DetectionResult:
        captured_at = getattr(frame, "timestamp", None) or time.time()
        result = DetectionResult(
            event_id=f"{self.camera_id}:{outcome.plate}:{int(captured_at)}",
            plate=outcome.plate,
            confidence=outcome.confidence,
            observations=outcome.observations,
            captured_at=captured_at,
            processed_at=time.time(),
            device_id=self.device_id,
            site_id=self._site_id(),
            camera_id=self.camera_id,
            region=outcome.region,
        )
        self._attach_image(result, frame)
        return result

    def _site_id(self) -> str:
        try:
            return self.site_repository.get_site_id()
        except Exception:
            logger.exception(f"[{self.camera_id}] No se pudo leer el sitio; usando valor por defecto")
            return settings.site_id_default

    def _attach_image(self, result: DetectionResult, frame: Frame) -> None:
        if self.send_mode is SendMode.NONE:
            return

        image = frame.data
        name = f"{result.plate}.jpg"

        if self.send_mode is SendMode.CROPPED_PLATE and result.region is not None:
            w, h = frame.size
            crop = result.region.clipped(w, h)
            if crop is not None:
                image = frame.data[crop.top:crop.bottom, crop.left:crop.right]
                name = "cropped_plate.jpg"

        ok, buf = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), int(self.jpeg_quality)])
        if not ok:
            logger.warning(f"[{self.camera_id}] No se pudo codificar JPEG; se envía sólo texto")
            return
        result.image = buf.tobytes()
        result.image_name = name

    # ---------------------------------------------------------
    # PUBLISH LOOP
    # ---------------------------------------------------------
    def _publish_loop(self):
        while not self.stop_event.is_set():
            try:
                event = self.publish_queue.get(timeout=1)
            except queue.Empty:
                continue

            if event is None:
                self.publish_queue.task_done()
                break

            try:
                self.publish_one(event)
            finally:
                self.publish_queue.task_done()

        logger.info(f"[{self.camera_id}] Publish loop terminado")

    def publish_one(self, event: DetectionResult) -> bool:
        self._safe_status("Enviando al servidor...")
        try:
            self.publisher.publish(event)
        except Exception as e:
            publish_failures_total.labels(camera_id=self.camera_id).inc()
            logger.exception(f"[{self.camera_id}] Error publicando placa {event.plate}")
            self._safe_status(f"Fallo de envío: {e}")
            return False

        self._safe_status("Envío exitoso")
        return True

    def _safe_status(self, message: str) -> None:
        try:
            self.notifier.status(message)
        except Exception:
            logger.exception(f"[{self.camera_id}] Notificador falló")
