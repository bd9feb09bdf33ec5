import cv2
import time
from typing import Optional
from plate_pipeline.domain.Models.frame import Frame
from plate_pipeline.domain.Interfaces.camera_stream import ICameraStream


class FakeCameraStream(ICameraStream):
    """
    Simula una cámara reproduciendo un archivo de video en bucle.
    """

    def __init__(self, video_path: str, camera_id: str = "fake"):
        self.video_path = video_path
        self.camera_id = camera_id
        self.cap = None

    def connect(self):
        self.cap = cv2.VideoCapture(self.video_path)
        if not self.cap.isOpened():
            raise RuntimeError(f"No se pudo abrir video {self.video_path}")

    def read_frame(self, timeout: float = 1.0) -> Optional[Frame]:
        start = time.time()
        while time.time() - start < timeout:
            ok, frame = self.cap.read()
            if ok:
                return Frame(data=frame, timestamp=time.time(), source=self.camera_id)
            # fin del video -> volver al inicio
            self.cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        return None

    def disconnect(self):
        if self.cap:
            self.cap.release()
            self.cap = None
