"""Scannability checks for rendered codes: decode, grid damage, logo occlusion."""

import time
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image

from qrframe.logging import audit, get_logger, trace
from qrframe.models import Geometry, LogoPlacement

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = "opencv"
    error: str | None = None


@trace
def scan(image: Image.Image) -> ScanResult:
    """Decode the first QR code in *image* with OpenCV's detector."""
    start = time.perf_counter()
    gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
    data, _, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    elapsed = (time.perf_counter() - start) * 1000

    if data:
        audit("scan.verified", logger=log, success=True, time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed)
    audit("scan.verified", logger=log, success=False, time_ms=round(elapsed, 1))
    return ScanResult(success=False, decode_time_ms=elapsed, error="No QR code detected")


def grid_damage(
    canvas: Image.Image,
    geometry: Geometry,
    grid: Image.Image,
    placement: LogoPlacement | None = None,
) -> float:
    """Fraction of grid pixels on *canvas* that differ from the standalone *grid*.

    Pixels under the logo patch are excluded when *placement* is given.
    """
    x0, y0, x1, y1 = geometry.grid_box
    on_canvas = np.asarray(canvas.convert("RGB").crop((x0, y0, x1, y1)), dtype=np.int16)
    expected = np.asarray(grid.convert("RGB"), dtype=np.int16)
    differs = np.any(on_canvas != expected, axis=-1)

    if placement is not None:
        px0, py0, px1, py1 = placement.patch
        ys, xs = np.mgrid[y0:y1, x0:x1]
        covered = (xs >= px0) & (xs < px1) & (ys >= py0) & (ys < py1)
        differs &= ~covered

    return float(differs.mean())


def logo_occlusion(geometry: Geometry, placement: LogoPlacement) -> float:
    """Share of the grid area hidden behind the logo patch."""
    gx0, gy0, gx1, gy1 = geometry.grid_box
    px0, py0, px1, py1 = placement.patch
    w = max(0.0, min(gx1, px1) - max(gx0, px0))
    h = max(0.0, min(gy1, py1) - max(gy0, py0))
    return (w * h) / float(geometry.grid_size ** 2)
