"""Title badge and caption line renderers."""

from PIL import ImageDraw

from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.logging import audit, get_logger
from qrframe.models import FrameSpec, Geometry
from qrframe.text import load_font

log = get_logger("captions")


def _draw_line(draw: ImageDraw.ImageDraw, xy: tuple[float, float], text: str, size: int, color: str, config: RenderConfig):
    if size <= 0 or not text:
        return
    # "la": left / ascender, i.e. the top of the em box
    draw.text(xy, text, fill=color, font=load_font(config.font_path, size), anchor="la")


def draw_title(draw: ImageDraw.ImageDraw, geometry: Geometry, frame: FrameSpec, config: RenderConfig = DEFAULT_CONFIG):
    """Draw the highlighted title badge and its text."""
    if geometry.title_line is None:
        return
    draw.rectangle(geometry.title_rect, fill=frame.title_background or config.title_background)
    line = geometry.title_line
    _draw_line(draw, geometry.title_origin, line.text, line.size, frame.border_color, config)
    audit("title.drawn", logger=log, text=line.text, size=line.size, rect=geometry.title_rect)


def draw_captions(draw: ImageDraw.ImageDraw, geometry: Geometry, frame: FrameSpec, config: RenderConfig = DEFAULT_CONFIG):
    """Draw each fitted caption line centred at its planned origin."""
    for line, origin in zip(geometry.caption_lines, geometry.caption_origins):
        _draw_line(draw, origin, line.text, line.size, frame.border_color, config)
    audit(
        "captions.drawn", logger=log,
        lines=len(geometry.caption_lines),
        sizes=[line.size for line in geometry.caption_lines],
    )
