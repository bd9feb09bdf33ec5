# plate_pipeline/infrastructure/Preprocessing/opencv_region_locator.py
import logging
from typing import Optional

import cv2
import numpy as np

from plate_pipeline.domain.Interfaces.plate_region_locator import IPlateRegionLocator
from plate_pipeline.domain.Models.text_line import BoundingBox

logger = logging.getLogger(__name__)


class OpenCVPlateRegionLocator(IPlateRegionLocator):
    """
    Busca un rectángulo con pinta de placa sin usar OCR:
    gris -> ecualización -> blur -> Sobel -> umbral -> cierre morfológico
    -> contornos -> filtro de proporción -> color de fondo de placa.
    """
    PLATE_RATIO = 4.3

    def __init__(
        self,
        aspect_range: tuple[float, float] = (2.5, 5.5),
        edge_threshold: int = 50,
        min_area_ratio: float = 0.001,
        color_ratio: float = 0.3,
    ):
        self.aspect_range = aspect_range
        self.edge_threshold = edge_threshold
        self.min_area_ratio = min_area_ratio
        self.color_ratio = color_ratio

    def locate_plate_region(self, image: np.ndarray) -> Optional[BoundingBox]:
        if image is None or image.size == 0:
            return None

        bgr = image if image.ndim == 3 else cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        gray = cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
        gray = cv2.equalizeHist(gray)
        gray = cv2.GaussianBlur(gray, (3, 3), 0)

        gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
        gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
        magnitude = cv2.convertScaleAbs(cv2.magnitude(gx, gy))
        _, edges = cv2.threshold(magnitude, self.edge_threshold, 255, cv2.THRESH_BINARY)

        kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (17, 3))
        closed = cv2.morphologyEx(edges, cv2.MORPH_CLOSE, kernel)

        contours, _ = cv2.findContours(closed, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        h_img, w_img = gray.shape[:2]
        min_area = self.min_area_ratio * h_img * w_img
        lo, hi = self.aspect_range

        best: Optional[BoundingBox] = None
        best_score = float("-inf")
        for c in contours:
            x, y, w, h = cv2.boundingRect(c)
            if h == 0 or w * h < min_area:
                continue
            aspect = w / float(h)
            if not (lo <= aspect <= hi):
                continue
            if not self._has_plate_colors(bgr[y:y + h, x:x + w]):
                continue

            score = w * h * (100 - abs(aspect - self.PLATE_RATIO) * 20)
            if score > best_score:
                best_score = score
                best = BoundingBox(int(x), int(y), int(w), int(h))

        if best is not None:
            logger.debug("Región de placa localizada: %s", best)
        return best

    def _has_plate_colors(self, roi: np.ndarray) -> bool:
        """Fondo blanco, amarillo, verde o azul en más del color_ratio del área."""
        if roi.size == 0:
            return False
        b = roi[..., 0].astype(np.int32)
        g = roi[..., 1].astype(np.int32)
        r = roi[..., 2].astype(np.int32)
        total = float(b.size)

        masks = (
            (r > 200) & (g > 200) & (b > 200),   # blanco
            (r > 200) & (g > 200) & (b < 100),   # amarillo
            (r < 100) & (g > 150) & (b < 100),   # verde
            (r < 100) & (g < 100) & (b > 150),   # azul
        )
        return any(m.sum() / total > self.color_ratio for m in masks)
