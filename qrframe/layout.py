"""Layout planner: canvas size and the position of every layer."""

from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.errors import LayoutOverflow
from qrframe.logging import audit, get_logger, trace
from qrframe.models import CaptionPosition, FittedTextLine, Geometry, LogoPlacement, RenderRequest
from qrframe.text import FontMeasurer, Measure, fit_text

log = get_logger("layout")


def _caption_origins(
    lines: list[FittedTextLine],
    width: int,
    margin: float,
    offset: float,
    position: CaptionPosition,
    text_margin: int,
) -> list[tuple[float, float]]:
    # bottom band starts below the inner box even when the margin is thinner than the text gap
    top = margin if position is CaptionPosition.TOP else max(width - text_margin, width - margin)
    origins = []
    for line in lines:
        origins.append((offset + (width - line.width) / 2, offset + top))
        top += line.size + text_margin
    return origins


@trace
def plan(request: RenderRequest, config: RenderConfig = DEFAULT_CONFIG, measure: Measure | None = None) -> Geometry:
    """Compute the full geometry for *request*.

    Raises:
        LayoutOverflow: the width leaves no room for the module grid.
        EmptyInput: propagated from text fitting.
    """
    width = request.width
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise LayoutOverflow(f"width must be a positive integer, got {width!r}")

    measure = measure or FontMeasurer(config)
    frame = request.frame
    framed = frame is not None
    position = frame.position if framed else CaptionPosition.BOTTOM

    margin = width / config.margin_divisor
    inner_size = width - margin * 2 if framed else width
    inner_box = round(inner_size)
    grid_size = round(inner_box * config.qr_scale)
    if inner_size <= 0 or grid_size < 1:
        raise LayoutOverflow(f"width {width} leaves no room for the QR grid")

    caption_lines: list[FittedTextLine] = []
    caption_block = 0
    if framed and frame.text:
        caption_lines = fit_text(inner_size, frame.text, measure, config.font_sizes)
        caption_block = sum(line.size + config.text_margin for line in caption_lines) + config.text_margin
    content_height = width + caption_block

    padding = config.padding
    offset = padding / 2
    canvas_size = (width + padding, content_height + padding)

    inner_left = margin if framed else 0
    inner_top = margin if framed else 0
    if framed and position is CaptionPosition.TOP:
        inner_top = content_height - width + margin
    inner_origin = (round(offset + inner_left), round(offset + inner_top))
    inset = (inner_box - grid_size) // 2
    grid_origin = (inner_origin[0] + inset, inner_origin[1] + inset)

    title_line = title_rect = title_origin = None
    if framed and frame.title:
        if config.supports_title:
            title_line = fit_text(canvas_size[0] / 2, frame.title.split("\n")[0], measure, config.font_sizes)[0]
            badge_w = title_line.width + config.title_padding_x
            badge_h = title_line.size + config.title_padding_y
            # badge straddles the frame edge opposite the caption band,
            # never reaching past the frame margin into the grid box
            x0 = (canvas_size[0] - badge_w) / 2
            if position is CaptionPosition.BOTTOM:
                y0 = min(offset - badge_h / 2, offset + margin - badge_h)
            else:
                y0 = max(offset + content_height - badge_h / 2, offset + content_height - margin)
            y0 = min(max(y0, 0), canvas_size[1] - badge_h)
            title_rect = (x0, y0, x0 + badge_w, y0 + badge_h)
            title_origin = (x0 + config.title_padding_x / 2, y0 + config.title_padding_y / 2)
        else:
            log.warning("title %r ignored: layout has no title band", frame.title)

    geometry = Geometry(
        width=width,
        margin=margin,
        inner_size=inner_size,
        framed=framed,
        position=position,
        content_height=content_height,
        canvas_size=canvas_size,
        offset=offset,
        caption_block_height=caption_block,
        frame_rect=(offset, offset, offset + width, offset + content_height),
        line_width=width / config.line_width_divisor,
        inner_origin=inner_origin,
        inner_box=inner_box,
        grid_origin=grid_origin,
        grid_size=grid_size,
        caption_lines=tuple(caption_lines),
        caption_origins=tuple(_caption_origins(caption_lines, width, margin, offset, position, config.text_margin)),
        title_line=title_line,
        title_rect=title_rect,
        title_origin=title_origin,
    )
    audit(
        "layout.planned", logger=log,
        canvas=f"{canvas_size[0]}x{canvas_size[1]}", inner=inner_size,
        grid=grid_size, captions=len(caption_lines), title=title_line is not None,
    )
    return geometry


def plan_logo(
    geometry: Geometry,
    logo_size: tuple[int, int],
    config: RenderConfig = DEFAULT_CONFIG,
    shrink: float = 1.0,
) -> LogoPlacement:
    """Place a logo of *logo_size* over the grid centre.

    The logo is shrunk (never enlarged) so neither side exceeds the
    configured fraction of the inner size, times *shrink*; the opaque patch
    behind it adds ``logo_padding_fraction`` of each scaled side on every edge.
    """
    src_w, src_h = logo_size
    limit = geometry.inner_size * config.logo_fraction * shrink
    scale = min(1.0, limit / max(src_w, src_h))
    w = max(1, int(src_w * scale))
    h = max(1, int(src_h * scale))

    cx, cy = geometry.grid_center
    x, y = round(cx - w / 2), round(cy - h / 2)
    pad_x = round(w * config.logo_padding_fraction)
    pad_y = round(h * config.logo_padding_fraction)
    return LogoPlacement(
        size=(w, h),
        origin=(x, y),
        patch=(x - pad_x, y - pad_y, x + w + pad_x, y + h + pad_y),
    )
