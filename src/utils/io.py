"""
I/O Utilities

Image and configuration file input/output operations.
"""

from pathlib import Path
from typing import Any, Dict

import cv2
import numpy as np
import yaml


def load_image(file_path: Path) -> np.ndarray:
    """
    Load an image file as a BGR array.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If OpenCV cannot decode the file.
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Input file does not exist: {file_path}")
    image = cv2.imread(str(file_path), cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError(f"Could not load image at {file_path}")
    return image


def save_image(image: np.ndarray, file_path: Path) -> Path:
    """
    Save an image, creating parent directories as needed.

    Raises:
        IOError: If OpenCV fails to encode or write the file.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(file_path), image):
        raise IOError(f"Failed to write image to {file_path}")
    return file_path


def load_yaml(file_path: Path) -> Dict[str, Any]:
    """Load YAML file."""
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def save_yaml(data: Dict[str, Any], file_path: Path):
    """Save data to YAML file."""
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
