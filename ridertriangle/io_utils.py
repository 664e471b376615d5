import json
from pathlib import Path

import cv2
import numpy as np


def load_image(image_path: Path, max_side: int) -> tuple[np.ndarray, float]:
    """
    Loads a BGR photo, shrinking it so its longest side is at most max_side.

    Returns the image and the applied resize factor; marker coordinates placed
    on the original photo must be multiplied by it.
    """
    image = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Could not open image: {image_path}")
    h, w = image.shape[:2]
    factor = 1.0
    if max(h, w) > max_side:
        factor = max_side / max(h, w)
        image = cv2.resize(image, (int(w * factor), int(h * factor)), interpolation=cv2.INTER_AREA)
    return image, factor


def save_report(path: Path, payload: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
