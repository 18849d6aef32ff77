"""
Batch Document Scanner

Runs detection and rectification on one image file and writes every
intermediate stage to an output directory for inspection:

    grey.png         blurred grayscale input
    canny.png        Canny edge map
    polar_lines.png  all Hough lines over the edge map
    lines.png        detected quadrilateral over the edge map
    corrected.png    rectified document (only when found)
    result.yaml      detection summary

Usage:
    python -m src.pipeline.scan_batch photo.jpg out/
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from src.common.exceptions import ScanError
from src.scanning.config_loader import get_default_config, load_config
from src.scanning.processor import ScanProcessor
from src.scanning.types import DetectionResult
from src.utils.io import load_image, save_image, save_yaml
from src.utils.logging_config import setup_logging
from src.utils.visualization import (
    GREEN,
    RED,
    draw_polar_lines,
    draw_quadrilateral,
    edges_to_color,
)

logger = logging.getLogger(__name__)


def summarize(input_path: Path, result: DetectionResult) -> Dict[str, Any]:
    """Detection summary as plain data for result.yaml."""
    return {
        "input": str(input_path),
        "status": result.status.value,
        "reason": result.reason.value,
        "line_count": len(result.lines),
        "cluster_count": result.cluster_count,
        "intersection_count": result.intersection_count,
        "quadrilateral": result.quadrilateral.to_list() if result.quadrilateral else None,
    }


def scan_file(
    input_path: Path, output_dir: Path, processor: ScanProcessor
) -> DetectionResult:
    """
    Scan one image and write the debug artifacts.

    Args:
        input_path: Image file to scan.
        output_dir: Directory for the artifacts, created if missing.
        processor: Configured scan processor.

    Returns:
        The detection result.

    Raises:
        FileNotFoundError: If input_path does not exist.
        DegenerateGeometryError: If the detected corners cannot be rectified.
    """
    image = load_image(input_path)
    output_dir.mkdir(parents=True, exist_ok=True)

    gray, edges = processor.prepare(image)
    save_image(gray, output_dir / "grey.png")
    save_image(edges, output_dir / "canny.png")

    result = processor.detect_edges(edges)
    logger.info(f"Found {len(result.lines)} polar lines")

    color_edges = edges_to_color(edges)
    save_image(draw_polar_lines(color_edges, result.lines, RED), output_dir / "polar_lines.png")

    if result.is_found():
        color_edges = draw_quadrilateral(color_edges, result.quadrilateral, GREEN)
        corrected = processor.rectify(image, result.quadrilateral)
        save_image(corrected, output_dir / "corrected.png")
    save_image(color_edges, output_dir / "lines.png")

    save_yaml(summarize(input_path, result), output_dir / "result.yaml")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the batch scanner."""
    parser = argparse.ArgumentParser(
        description="Detect and rectify the document in an image, saving debug stages",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("input", type=str, help="Input image file")
    parser.add_argument("output_dir", type=str, help="Directory for the output images")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Scanner configuration YAML (defaults to the bundled config)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    args = parser.parse_args(argv)

    setup_logging(getattr(logging, args.log_level))

    input_path = Path(args.input)
    output_dir = Path(args.output_dir)

    try:
        options = load_config(Path(args.config)) if args.config else get_default_config()
        result = scan_file(input_path, output_dir, ScanProcessor(config=options))
    except (FileNotFoundError, ScanError, ValueError) as e:
        logger.error(f"Scan failed: {e}")
        return 1

    print("=" * 60)
    print(f"Input:  {input_path}")
    print(f"Output: {output_dir}")
    print(f"Result: {result.get_message()}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
