"""Frame renderer: background fill and square / rounded border."""

from PIL import ImageDraw

from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.logging import audit, get_logger
from qrframe.models import FrameSpec, FrameStyle, Geometry

log = get_logger("frame")

Point = tuple[float, float]


def _quadratic_bezier(p0: Point, p1: Point, p2: Point, n: int = 12) -> list[Point]:
    """Generate *n+1* points along a quadratic Bezier curve."""
    pts = []
    for i in range(n + 1):
        t = i / n
        u = 1 - t
        pts.append((
            u * u * p0[0] + 2 * u * t * p1[0] + t * t * p2[0],
            u * u * p0[1] + 2 * u * t * p1[1] + t * t * p2[1],
        ))
    return pts


def round_rect_path(left: float, top: float, width: float, height: float, radius: float) -> list[Point]:
    """Closed outline of a rounded rectangle, clockwise from the top-left edge.

    Each side is a straight edge between two corners, each corner a quadratic
    curve with the rectangle corner as control point. ``radius=0`` yields a
    plain rectangle.
    """
    right, bottom = left + width, top + height
    corners = [
        # (edge end, control, curve end)
        ((right - radius, top), (right, top), (right, top + radius)),
        ((right, bottom - radius), (right, bottom), (right - radius, bottom)),
        ((left + radius, bottom), (left, bottom), (left, bottom - radius)),
        ((left, top + radius), (left, top), (left + radius, top)),
    ]
    path: list[Point] = [(left + radius, top)]
    for edge_end, control, curve_end in corners:
        if radius > 0:
            path.extend(_quadratic_bezier(edge_end, control, curve_end))
        else:
            path.append(control)
    return path


def draw_frame(draw: ImageDraw.ImageDraw, geometry: Geometry, frame: FrameSpec, config: RenderConfig = DEFAULT_CONFIG):
    """Fill the frame background and stroke its border."""
    lw = geometry.line_width
    x0, y0, x1, y1 = geometry.frame_rect
    path = round_rect_path(
        x0 + lw / 2,
        y0 + lw / 2,
        (x1 - x0) - lw,
        (y1 - y0) - lw,
        config.corner_radius if frame.style is FrameStyle.ROUNDED else 0,
    )

    if frame.style is FrameStyle.ROUNDED:
        draw.polygon(path, fill=frame.fill_color)
    else:
        draw.rectangle(geometry.frame_rect, fill=frame.fill_color)

    if frame.style is not FrameStyle.NONE:
        # repeat the first edge so the start point is joined like the others
        draw.line(path + path[:2], fill=frame.border_color, width=max(1, round(lw)), joint="curve")

    audit("frame.drawn", logger=log, style=frame.style.value, line_width=lw, rect=geometry.frame_rect)
