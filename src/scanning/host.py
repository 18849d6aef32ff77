"""
Host Application Entry Points

Raw-buffer API for applications that hand over RGBA frames rather than
image files. Each call is independent; logging is set up on first use.
"""

import functools
import logging
from typing import Optional, Union

from src.common.types import ImageBuffer, Quadrilateral
from src.scanning import image_ops
from src.scanning.config_loader import ScanOptions, get_default_config
from src.scanning.processor import ScanProcessor
from src.scanning.types import TransformResult
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

RGBA_CHANNELS = 4

RawBuffer = Union[bytes, bytearray, memoryview]


@functools.lru_cache(maxsize=1)
def _default_options() -> ScanOptions:
    return get_default_config()


def find_paper(width: int, height: int, buffer: RawBuffer) -> Optional[Quadrilateral]:
    """
    Locate the document in an RGBA frame.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        buffer: Row-major RGBA samples, width * height * 4 bytes.

    Returns:
        The document quadrilateral in frame coordinates, or None.

    Raises:
        InvalidBufferSizeError: If the buffer length does not match.
    """
    setup_logging()

    frame = ImageBuffer.from_raw(width, height, buffer, channels=RGBA_CHANNELS)
    image = image_ops.rgba_to_bgra(frame.data)
    result = ScanProcessor(config=_default_options()).detect(image)
    logger.debug(result.get_message())
    return result.quadrilateral


def transform_paper(
    width: int,
    height: int,
    buffer: RawBuffer,
    quadrilateral: Quadrilateral,
    ratio: float = 1.0,
) -> TransformResult:
    """
    Rectify the document region of an RGBA frame.

    Args:
        width: Frame width in pixels.
        height: Frame height in pixels.
        buffer: Row-major RGBA samples, width * height * 4 bytes.
        quadrilateral: Document corners, possibly found on a smaller frame.
        ratio: Factor mapping the quadrilateral into this frame.

    Returns:
        TransformResult with the rectified RGBA document.

    Raises:
        InvalidBufferSizeError: If the buffer length does not match.
        DegenerateGeometryError: If the corners cannot be rectified.
    """
    setup_logging()

    frame = ImageBuffer.from_raw(width, height, buffer, channels=RGBA_CHANNELS)
    image = image_ops.rgba_to_bgra(frame.data)
    rectified = ScanProcessor(config=_default_options()).rectify(image, quadrilateral, ratio)
    rgba = image_ops.bgra_to_rgba(rectified)

    return TransformResult(
        width=int(rgba.shape[1]),
        height=int(rgba.shape[0]),
        buffer=rgba.tobytes(),
    )
