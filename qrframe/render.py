"""Render orchestrator: plan, draw every layer in z-order, return the canvas."""

import asyncio
import base64
import io
from typing import Any

from PIL import Image, ImageDraw

from qrframe.captions import draw_captions, draw_title
from qrframe.compositor import LogoLoader, composite, encode_grid
from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.fetch import fetch_logo
from qrframe.frame import draw_frame
from qrframe.layout import plan
from qrframe.logging import audit, get_logger, trace
from qrframe.models import RenderRequest
from qrframe.text import Measure

log = get_logger("render")


@trace
async def create_qr_code(
    request: RenderRequest,
    config: RenderConfig = DEFAULT_CONFIG,
    *,
    measure: Measure | None = None,
    logo_loader: LogoLoader = fetch_logo,
) -> Image.Image:
    """Render *request* onto a fresh RGB canvas.

    Layers, bottom to top: background and frame, title badge, captions,
    module grid, logo patch, logo.

    Raises:
        InvalidColor, LayoutOverflow, EmptyInput: before anything is drawn.
        LogoUnavailable: after every other layer is drawn; ``exc.canvas`` is
            that scannable pre-logo image.
    """
    geometry = plan(request, config, measure)
    grid = encode_grid(request.text, geometry.grid_size, request.dark, request.light, config)

    canvas = Image.new("RGB", geometry.canvas_size, config.canvas_color)
    draw = ImageDraw.Draw(canvas)

    frame = request.frame
    if frame is not None:
        draw.rectangle((0, 0, canvas.width, canvas.height), fill=frame.fill_color)
        draw_frame(draw, geometry, frame, config)
        draw_title(draw, geometry, frame, config)
        if frame.text:
            draw_captions(draw, geometry, frame, config)

    await composite(canvas, request, geometry, grid, config, logo_loader)

    audit(
        "qr.rendered", logger=log,
        data=request.text[:80], canvas=f"{canvas.width}x{canvas.height}",
        framed=frame is not None, logo=request.wants_logo,
    )
    return canvas


def render_qr_code(request: RenderRequest, config: RenderConfig = DEFAULT_CONFIG, **kwargs) -> Image.Image:
    """Blocking wrapper around :func:`create_qr_code`."""
    return asyncio.run(create_qr_code(request, config, **kwargs))


def to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_png(request: RenderRequest, config: RenderConfig = DEFAULT_CONFIG, **kwargs) -> dict[str, Any]:
    """Render into PNG bytes and a base64 string."""
    png_bytes = to_png_bytes(render_qr_code(request, config, **kwargs))
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
    }
