"""Render request and derived geometry types."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from qrframe.colors import parse_color


class FrameStyle(Enum):
    NONE = "none"
    SQUARE = "square"
    ROUNDED = "rounded"


class CaptionPosition(Enum):
    TOP = "top"
    BOTTOM = "bottom"


def _optional_color(value) -> str | None:
    return None if value is None else parse_color(value)


@dataclass(frozen=True)
class FrameSpec:
    """Frame decoration: border style, caption, title and colours."""
    style: FrameStyle = FrameStyle.NONE
    position: CaptionPosition = CaptionPosition.BOTTOM
    text: str | None = None
    title: str | None = None
    color: str | None = None
    background_color: str | None = None
    title_background: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "style", FrameStyle(self.style or FrameStyle.NONE))
        object.__setattr__(self, "position", CaptionPosition(self.position or CaptionPosition.BOTTOM))
        for name in ("color", "background_color", "title_background"):
            object.__setattr__(self, name, _optional_color(getattr(self, name)))

    @property
    def border_color(self) -> str:
        return self.color or "#000000"

    @property
    def fill_color(self) -> str:
        return self.background_color or "#ffffff"


@dataclass(frozen=True)
class LogoSpec:
    url: str
    enabled: bool = True


@dataclass(frozen=True)
class RenderRequest:
    """Everything one render needs. Colours are normalised to ``#rrggbb``."""
    text: str
    width: int
    dark_color: str | None = None
    light_color: str | None = None
    frame: FrameSpec | None = None
    logo: LogoSpec | None = None

    def __post_init__(self):
        object.__setattr__(self, "dark_color", _optional_color(self.dark_color))
        object.__setattr__(self, "light_color", _optional_color(self.light_color))

    @property
    def dark(self) -> str:
        return self.dark_color or "#000000"

    @property
    def light(self) -> str:
        return self.light_color or "#ffffff"

    @property
    def wants_logo(self) -> bool:
        return self.logo is not None and self.logo.enabled and bool(self.logo.url)

    @classmethod
    def from_dict(cls, data: Mapping) -> "RenderRequest":
        """Build a request from a loose mapping.

        Accepts snake_case or camelCase keys, ``frame.color.rgba`` colour
        records and the nested ``{"logo": {"logo": {"url": ...}}}`` shape.
        """
        frame = data.get("frame")
        if isinstance(frame, Mapping):
            frame = FrameSpec(
                style=frame.get("style") or FrameStyle.NONE,
                position=frame.get("position") or CaptionPosition.BOTTOM,
                text=frame.get("text"),
                title=frame.get("title"),
                color=frame.get("color"),
                background_color=frame.get("background_color", frame.get("backgroundColor")),
                title_background=frame.get("title_background", frame.get("titleBackground")),
            )
        logo = data.get("logo")
        if isinstance(logo, Mapping):
            inner = logo.get("logo", logo)
            if isinstance(inner, Mapping) and inner.get("url"):
                logo = LogoSpec(url=inner["url"], enabled=bool(inner.get("enabled", True)))
            else:
                logo = None
        elif isinstance(logo, str):
            logo = LogoSpec(url=logo)
        return cls(
            text=data["text"],
            width=data["width"],
            dark_color=data.get("dark_color", data.get("darkColorHex")),
            light_color=data.get("light_color", data.get("lightColorHex")),
            frame=frame or None,
            logo=logo or None,
        )


@dataclass(frozen=True)
class FittedTextLine:
    text: str
    size: int
    width: float


Box = tuple[float, float, float, float]
IntBox = tuple[int, int, int, int]


@dataclass(frozen=True)
class Geometry:
    """Pixel layout of one render. All coordinates are canvas coordinates."""
    width: int
    margin: float
    inner_size: float
    framed: bool
    position: CaptionPosition
    content_height: int
    canvas_size: tuple[int, int]
    offset: float
    caption_block_height: int
    frame_rect: Box
    line_width: float
    inner_origin: tuple[int, int]
    inner_box: int
    grid_origin: tuple[int, int]
    grid_size: int
    caption_lines: tuple[FittedTextLine, ...] = ()
    caption_origins: tuple[tuple[float, float], ...] = ()
    title_line: FittedTextLine | None = None
    title_rect: Box | None = None
    title_origin: tuple[float, float] | None = None

    @property
    def canvas_width(self) -> int:
        return self.canvas_size[0]

    @property
    def canvas_height(self) -> int:
        return self.canvas_size[1]

    @property
    def grid_box(self) -> tuple[int, int, int, int]:
        x, y = self.grid_origin
        return x, y, x + self.grid_size, y + self.grid_size

    @property
    def grid_center(self) -> tuple[float, float]:
        x, y = self.inner_origin
        return x + self.inner_box / 2, y + self.inner_box / 2


@dataclass(frozen=True)
class LogoPlacement:
    size: tuple[int, int]
    origin: tuple[int, int]
    patch: IntBox = field(default=(0, 0, 0, 0))
