import logging

import cv2
import numpy as np
import pytest


@pytest.fixture
def session_payload():
    return {
        "riding_style": "touring",
        "rider": {"name": "Test", "height_cm": 180},
        "bikes": [
            {
                "key": "gsx",
                "preset": "gsx",
                "image": "gsx.jpg",
                "calibration": {"top": {"x": 200, "y": 300}, "bot": {"x": 200, "y": 611}},
                "axle": {"x": 200, "y": 455},
                "markers": {
                    "seat": {"x": 300, "y": 100},
                    "peg": {"x": 280, "y": 330},
                    "bar": {"x": 520, "y": 20},
                },
            },
            {
                "key": "vstrom",
                "preset": "vstrom",
                "image": "vstrom.jpg",
                "calibration": {"top": {"x": 100, "y": 150}, "bot": {"x": 100, "y": 471}},
                "axle": {"x": 100, "y": 310},
                "markers": {
                    "seat": {"x": 210, "y": 60},
                    "peg": {"x": 190, "y": 300},
                    "bar": {"x": 420, "y": 0},
                },
            },
        ],
    }


@pytest.fixture
def photo_dir(tmp_path):
    for name, color in (("gsx.jpg", (40, 40, 40)), ("vstrom.jpg", (200, 200, 200))):
        image = np.full((700, 800, 3), color, dtype=np.uint8)
        cv2.imwrite(str(tmp_path / name), image)
    return tmp_path


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    # the CLI attaches handlers bound to the captured streams
    logger = logging.getLogger("ridertriangle")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
