"""QR compositor: encode the module grid, blit it, and overlay the logo."""

import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import numpy as np
import qrcode
import qrcode.base
import qrcode.constants
from PIL import Image, ImageDraw

from qrframe.colors import contrast_ratio, hex_to_rgb
from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.errors import LayoutOverflow, LogoUnavailable
from qrframe.fetch import fetch_logo
from qrframe.layout import plan_logo
from qrframe.logging import audit, get_logger, trace
from qrframe.models import Geometry, LogoPlacement, RenderRequest
from qrframe.verify import scan

log = get_logger("compositor")

LogoLoader = Callable[[str], Awaitable[Image.Image]]

ECC_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,  # 7%
    "M": qrcode.constants.ERROR_CORRECT_M,  # 15%
    "Q": qrcode.constants.ERROR_CORRECT_Q,  # 25%
    "H": qrcode.constants.ERROR_CORRECT_H,  # 30%
}


@dataclass
class ECCBudget:
    """How much of the symbol's error correction a logo patch consumes."""

    version: int
    ecc: str
    correctable_codewords: int
    correctable_modules: int
    covered_modules: int
    budget_used_pct: float
    safe: bool


def qr_symbol(text: str, config: RenderConfig = DEFAULT_CONFIG) -> qrcode.QRCode:
    """Build the smallest symbol that holds *text* at the configured ECC level."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ECC_LEVELS[config.error_correction.upper()],
        box_size=1,
        border=config.qr_border_modules,
    )
    qr.add_data(text)
    qr.make(fit=True)
    return qr


def module_matrix(text: str, config: RenderConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Boolean module matrix (True = dark) including the configured quiet zone."""
    return np.array(qr_symbol(text, config).get_matrix(), dtype=bool)


@trace
def encode_grid(text: str, pixel_size: int, dark: str, light: str, config: RenderConfig = DEFAULT_CONFIG) -> Image.Image:
    """Render *text* as an RGB module grid exactly *pixel_size* pixels square.

    Raises:
        LayoutOverflow: fewer pixels than modules, which would drop modules.
    """
    matrix = module_matrix(text, config)
    modules = matrix.shape[0]
    if pixel_size < modules:
        raise LayoutOverflow(f"{pixel_size}px cannot hold a {modules}x{modules} module grid")

    ratio = contrast_ratio(dark, light)
    if ratio < config.min_contrast:
        audit("grid.low_contrast", logger=log, level=logging.WARNING,
              dark=dark, light=light, ratio=round(ratio, 2), minimum=config.min_contrast)

    pixels = np.where(matrix[..., None], np.array(hex_to_rgb(dark), dtype=np.uint8), np.array(hex_to_rgb(light), dtype=np.uint8))
    grid = Image.fromarray(pixels.astype(np.uint8)).resize((pixel_size, pixel_size), Image.Resampling.NEAREST)
    audit("grid.encoded", logger=log, data=text[:80], modules=f"{modules}x{modules}", px=pixel_size)
    return grid


def blit_grid(canvas: Image.Image, geometry: Geometry, grid: Image.Image, light: str):
    """Paste the grid centred on a light square covering the inner box."""
    backing = Image.new("RGB", (geometry.inner_box, geometry.inner_box), light)
    ix, iy = geometry.inner_origin
    gx, gy = geometry.grid_origin
    backing.paste(grid, (gx - ix, gy - iy))
    canvas.paste(backing, geometry.inner_origin)


@trace
def compute_ecc_budget(
    symbol: qrcode.QRCode,
    geometry: Geometry,
    placement: LogoPlacement,
    config: RenderConfig = DEFAULT_CONFIG,
) -> ECCBudget:
    """Estimate how many modules the logo patch hides against what ECC can repair.

    Every module the patch touches counts as lost. Reed-Solomon repairs up to
    half the ECC codewords of each block, 8 modules per codeword.
    """
    border = config.qr_border_modules
    modules = symbol.modules_count + 2 * border
    pitch = geometry.grid_size / modules
    gx, gy = geometry.grid_origin
    px0, py0, px1, py1 = placement.patch

    def span(start, end, origin):
        first = max(border, math.floor((start - origin) / pitch))
        last = min(modules - border, math.ceil((end - origin) / pitch))
        return max(0, last - first)

    covered = span(px0, px1, gx) * span(py0, py1, gy)
    blocks = qrcode.base.rs_blocks(symbol.version, symbol.error_correction)
    correctable_cw = sum((block.total_count - block.data_count) // 2 for block in blocks)
    correctable_modules = correctable_cw * 8
    used = covered / correctable_modules if correctable_modules > 0 else 1.0

    budget = ECCBudget(
        version=symbol.version,
        ecc=config.error_correction.upper(),
        correctable_codewords=correctable_cw,
        correctable_modules=correctable_modules,
        covered_modules=covered,
        budget_used_pct=used * 100,
        safe=used <= config.logo_ecc_budget,
    )
    audit(
        "ecc.budget", logger=log,
        version=budget.version, ecc=budget.ecc,
        correctable=correctable_modules, covered=covered,
        budget_pct=f"{used:.1%}", safe=budget.safe,
    )
    return budget


def _paint_logo(canvas: Image.Image, placement: LogoPlacement, logo: Image.Image, light: str):
    x0, y0, x1, y1 = placement.patch
    ImageDraw.Draw(canvas).rectangle((x0, y0, x1 - 1, y1 - 1), fill=light)
    scaled = logo.convert("RGBA").resize(placement.size, Image.Resampling.LANCZOS)
    canvas.paste(scaled, placement.origin, scaled)


@trace
def fit_logo(
    canvas: Image.Image,
    geometry: Geometry,
    logo: Image.Image,
    request: RenderRequest,
    config: RenderConfig = DEFAULT_CONFIG,
) -> LogoPlacement:
    """Pick the largest logo placement the code survives.

    Each of ``config.logo_shrink_steps`` is tried in order. A step must fit
    the ECC budget and, with ``verify_logo_scan``, a trial composite on a
    copy of *canvas* must still decode to the request text. When no step
    passes, the smallest one is used and a warning is logged.
    """
    symbol = qr_symbol(request.text, config)
    placement = None
    for shrink in config.logo_shrink_steps:
        placement = plan_logo(geometry, logo.size, config, shrink)
        if not compute_ecc_budget(symbol, geometry, placement, config).safe:
            log.info("Logo at %.0f%% covers too many modules, shrinking", shrink * 100)
            continue
        if not config.verify_logo_scan:
            return placement
        trial = canvas.copy()
        _paint_logo(trial, placement, logo, request.light)
        if scan(trial).decoded_data == request.text:
            return placement
        log.info("Logo at %.0f%% breaks decoding, shrinking", shrink * 100)

    audit("logo.unverified", logger=log, level=logging.WARNING,
          logo_size=f"{placement.size[0]}x{placement.size[1]}")
    return placement


@trace
def composite_logo(
    canvas: Image.Image,
    geometry: Geometry,
    logo: Image.Image,
    light: str,
    config: RenderConfig = DEFAULT_CONFIG,
    placement: LogoPlacement | None = None,
) -> LogoPlacement:
    """Paint the opaque padding patch, then the scaled logo on top of it."""
    placement = placement or plan_logo(geometry, logo.size, config)
    _paint_logo(canvas, placement, logo, light)
    audit(
        "logo.composited", logger=log,
        source_size=f"{logo.size[0]}x{logo.size[1]}",
        logo_size=f"{placement.size[0]}x{placement.size[1]}",
        origin=placement.origin,
    )
    return placement


@trace
async def composite(
    canvas: Image.Image,
    request: RenderRequest,
    geometry: Geometry,
    grid: Image.Image,
    config: RenderConfig = DEFAULT_CONFIG,
    logo_loader: LogoLoader = fetch_logo,
) -> LogoPlacement | None:
    """Blit the grid, then fetch and overlay the logo if one is requested.

    The grid is fully drawn before the logo is awaited, so a failed fetch
    leaves a scannable canvas behind. The logo is sized by :func:`fit_logo`.

    Raises:
        LogoUnavailable: with ``canvas`` set to the pre-logo image.
    """
    blit_grid(canvas, geometry, grid, request.light)
    if not request.wants_logo:
        return None

    source = request.logo.url
    try:
        logo = await logo_loader(source)
    except LogoUnavailable as exc:
        exc.canvas = canvas
        raise
    except Exception as exc:
        raise LogoUnavailable(f"cannot load logo from {source}: {exc}", source=source, canvas=canvas) from exc
    placement = fit_logo(canvas, geometry, logo, request, config)
    return composite_logo(canvas, geometry, logo, request.light, config, placement)
