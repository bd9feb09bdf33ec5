import numpy as np

from plate_pipeline.infrastructure.Preprocessing.opencv_region_locator import OpenCVPlateRegionLocator


def _canvas():
    return np.zeros((300, 400, 3), dtype=np.uint8)


def test_finds_white_plate_shaped_rectangle():
    image = _canvas()
    image[125:175, 100:300] = 255

    box = OpenCVPlateRegionLocator().locate_plate_region(image)

    assert box is not None
    # solapa con el rectángulo dibujado
    assert box.left < 300 and box.right > 100
    assert box.top < 175 and box.bottom > 125
    assert 2.5 <= box.width / box.height <= 5.5


def test_blank_image_has_no_region():
    assert OpenCVPlateRegionLocator().locate_plate_region(_canvas()) is None


def test_square_shape_is_rejected():
    image = _canvas()
    image[100:200, 150:250] = 255
    assert OpenCVPlateRegionLocator().locate_plate_region(image) is None


def test_dark_rectangle_is_rejected():
    image = np.full((300, 400, 3), 255, dtype=np.uint8)
    image[125:175, 100:300] = 0
    box = OpenCVPlateRegionLocator(color_ratio=0.9).locate_plate_region(image)
    assert box is None


def test_empty_input():
    locator = OpenCVPlateRegionLocator()
    assert locator.locate_plate_region(None) is None
    assert locator.locate_plate_region(np.zeros((0, 0, 3), dtype=np.uint8)) is None
