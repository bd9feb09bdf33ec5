import cv2
import time
import logging
import threading
from typing import Optional

from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Interfaces.camera_stream import ICameraStream

logger = logging.getLogger(__name__)


class OpenCVCameraStream(ICameraStream):
    """
    Stream de cámara con OpenCV (índice de dispositivo, RTSP, HTTP o archivo).
    Un hilo interno lee continuamente y guarda SOLO el último frame, así
    read_frame nunca devuelve frames atrasados.
    """

    def __init__(self, url: str, camera_id: Optional[str] = None, reconnect_attempts: int = 3):
        self.url = url
        self.camera_id = camera_id or str(url)
        self.reconnect_attempts = reconnect_attempts

        self.cap = None
        self._frame_lock = threading.Lock()
        self._latest_frame: Optional[Frame] = None
        self._running = False
        self._thread: Optional[threading.Thread] = None

    # ==========================================================
    # CONNECT
    # ==========================================================
    def connect(self) -> None:
        self.cap = self._open()
        if not self.cap or not self.cap.isOpened():
            raise ConnectionError(f"No se pudo abrir el stream: {self.url}")

        logger.info(f"🎥 Conectado a {self.camera_id}")

        self._running = True
        self._thread = threading.Thread(target=self._update_frames, daemon=True)
        self._thread.start()

    def _open(self):
        # "0", "1"... -> cámara local
        source = int(self.url) if str(self.url).isdigit() else self.url
        cap = cv2.VideoCapture(source)
        if isinstance(source, str) and source.startswith("rtsp://"):
            cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        return cap

    # ==========================================================
    # HILO DE LECTURA
    # ==========================================================
    def _update_frames(self):
        while self._running:
            ret, frame = self.cap.read() if self.cap is not None else (False, None)
            if not ret:
                logger.warning(f"[{self.camera_id}] Error al leer frame, intentando reconectar...")
                if not self._try_reconnect():
                    time.sleep(1)
                continue

            with self._frame_lock:
                self._latest_frame = Frame(data=frame, timestamp=time.time(), source=self.camera_id)

    # ==========================================================
    # READ FRAME
    # ==========================================================
    def read_frame(self, timeout: float = 1.0) -> Optional[Frame]:
        """
        Devuelve (y consume) el último frame disponible.
        None si no llega ninguno antes del timeout.
        """
        deadline = time.time() + timeout
        while time.time() < deadline and self._running:
            with self._frame_lock:
                frame, self._latest_frame = self._latest_frame, None
            if frame is not None:
                return frame
            time.sleep(0.01)
        return None

    # ==========================================================
    # RECONNECT
    # ==========================================================
    def _try_reconnect(self) -> bool:
        for attempt in range(1, self.reconnect_attempts + 1):
            if not self._running:
                return False
            logger.warning(f"[{self.camera_id}] Reintentando conexión {attempt}/{self.reconnect_attempts}...")
            if self.cap is not None:
                self.cap.release()
            self.cap = self._open()
            if self.cap.isOpened():
                logger.info(f"[{self.camera_id}] Reconexión exitosa.")
                return True
            time.sleep(1)

        logger.error(f"[{self.camera_id}] No se pudo reconectar al stream.")
        return False

    # ==========================================================
    # DISCONNECT
    # ==========================================================
    def disconnect(self) -> None:
        self._running = False
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        logger.info(f"🔌 Stream cerrado ({self.camera_id}).")
