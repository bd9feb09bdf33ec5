# plate_pipeline/infrastructure/Camera/camera_factory.py
from typing import Optional
from plate_pipeline.core.config import settings
from plate_pipeline.domain.Interfaces.camera_stream import ICameraStream

def create_camera_stream(url: Optional[str] = None, camera_id: Optional[str] = None) -> ICameraStream:
    """
    Crea el stream correcto: video en bucle (fake://ruta) o OpenCV.
    """
    url = url or settings.camera_url

    if settings.use_fake_cam or url.startswith("fake://"):
        from plate_pipeline.infrastructure.Camera.fake_camera_stream import FakeCameraStream
        return FakeCameraStream(video_path=url.replace("fake://", ""), camera_id=camera_id or "fake")

    from plate_pipeline.infrastructure.Camera.opencv_camera_stream import OpenCVCameraStream
    return OpenCVCameraStream(url, camera_id=camera_id)
