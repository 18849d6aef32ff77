"""
Configuration loader with Pydantic validation for the Scanning module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

import logging
from pathlib import Path
from typing import Literal, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from src.utils.io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class LineDetectionOptions(BaseModel):
    """Hough line detection parameters.

    Attributes:
        vote_threshold: Minimum accumulator votes for a line to be reported.
        suppression_radius: Lines within this many degrees and pixels of a
            stronger line are dropped.
    """

    vote_threshold: int = Field(default=60, gt=0)
    suppression_radius: int = Field(default=8, ge=0)

    model_config = {"frozen": True}


class ClusteringOptions(BaseModel):
    """Line clustering parameters.

    Attributes:
        angle_tolerance: Maximum angle difference (exclusive) in degrees.
        radius_tolerance_ratio: Maximum radius difference (exclusive) as a
            fraction of the larger image dimension.
        wrap_angles: Measure angle distance on the half circle, so 179 and
            0 degrees are neighbours.
        sort_lines: Sort lines by (angle, r) before the greedy pass.
    """

    angle_tolerance: int = Field(default=10, gt=0, le=90)
    radius_tolerance_ratio: float = Field(default=0.05, gt=0.0, le=1.0)
    wrap_angles: bool = True
    sort_lines: bool = True

    model_config = {"frozen": True}


class CornerOptions(BaseModel):
    """Corner labelling parameters.

    Attributes:
        strategy: "centroid" labels corners by their angle around the
            centroid; "axis" sorts by x then y and assumes a near
            axis-aligned document.
    """

    strategy: Literal["centroid", "axis"] = "centroid"

    model_config = {"frozen": True}


class RectifyOptions(BaseModel):
    """Perspective rectification parameters.

    Attributes:
        interpolation: Resampling used by the warp.
        fill_color: BGRA color for pixels with no source mapping.
    """

    interpolation: Literal["nearest", "linear", "cubic"] = "nearest"
    fill_color: Tuple[int, int, int, int] = (0, 0, 255, 255)

    model_config = {"frozen": True}

    @field_validator("fill_color")
    @classmethod
    def _validate_fill_color(cls, v: Tuple[int, int, int, int]) -> Tuple[int, int, int, int]:
        if any(c < 0 or c > 255 for c in v):
            raise ValueError(f"fill_color channels must be in [0, 255], got {v}")
        return v


class ScanOptions(BaseModel):
    """Complete scanner configuration.

    Attributes:
        canny_low: Lower Canny hysteresis threshold.
        canny_high: Upper Canny hysteresis threshold.
        sigma_blur: Gaussian blur sigma applied before edge detection.
        rdp_epsilon: Reserved polygon-simplification epsilon (unused).
        contour_threshold: Reserved binarization threshold (unused).
        line_detection: Hough transform parameters.
        clustering: Line clustering parameters.
        corners: Corner labelling parameters.
        rectify: Perspective rectification parameters.
        debug: Emit debug logging for intermediate results.
    """

    canny_low: float = Field(default=10.0, ge=0.0)
    canny_high: float = Field(default=80.0, ge=0.0)
    sigma_blur: float = Field(default=2.0, gt=0.0)
    rdp_epsilon: float = Field(default=1.0, ge=0.0)
    contour_threshold: int = Field(default=200, ge=0, le=255)
    line_detection: LineDetectionOptions = Field(default_factory=LineDetectionOptions)
    clustering: ClusteringOptions = Field(default_factory=ClusteringOptions)
    corners: CornerOptions = Field(default_factory=CornerOptions)
    rectify: RectifyOptions = Field(default_factory=RectifyOptions)
    debug: bool = True

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_canny_order(self) -> "ScanOptions":
        if self.canny_low > self.canny_high:
            raise ValueError(
                f"canny_low ({self.canny_low}) must not exceed canny_high ({self.canny_high})"
            )
        return self


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ScanOptions:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file.

    Returns:
        Validated ScanOptions object.

    Raises:
        FileNotFoundError: If config file does not exist.
        yaml.YAMLError: If YAML parsing fails.
        pydantic.ValidationError: If configuration validation fails.

    Example:
        >>> options = load_config(Path("src/scanning/config.yaml"))
        >>> print(options.line_detection.vote_threshold)
        60
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading scan config from {config_path}")

    config_dict = load_yaml(config_path)

    return ScanOptions(**config_dict)


def get_default_config() -> ScanOptions:
    """Get default configuration from the bundled config.yaml file.

    Falls back to the model defaults if the bundled file is missing.
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return ScanOptions()
