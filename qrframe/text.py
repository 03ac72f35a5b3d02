"""Caption text fitting: pick the largest candidate font size that fits a width."""

from collections.abc import Callable, Sequence
from functools import lru_cache

from PIL import ImageFont

from qrframe.config import DEFAULT_CONFIG, RenderConfig
from qrframe.errors import EmptyInput
from qrframe.logging import get_logger, trace
from qrframe.models import FittedTextLine

log = get_logger("text")

# (text, size) -> rendered width in pixels
Measure = Callable[[str, int], float]


@lru_cache(maxsize=128)
def load_font(path: str, size: int) -> ImageFont.FreeTypeFont:
    """Load a TrueType font, falling back to Pillow's bundled scalable font."""
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        log.debug("font %s unavailable, using Pillow default", path)
        return ImageFont.load_default(size=size)


class FontMeasurer:
    """Text measurement backed by the same fonts the renderers draw with."""

    def __init__(self, config: RenderConfig = DEFAULT_CONFIG):
        self.config = config

    def font(self, size: int) -> ImageFont.FreeTypeFont:
        return load_font(self.config.font_path, size)

    def __call__(self, text: str, size: int) -> float:
        if size <= 0 or not text:
            return 0.0
        return float(self.font(size).getlength(text))


def _fit_line(line: str, bounding_width: float, measure: Measure, font_sizes: Sequence[int]) -> FittedTextLine:
    measured = ((size, measure(line, size)) for size in font_sizes)
    size, width = next(
        ((size, width) for size, width in measured if width < bounding_width),
        (font_sizes[-1], measure(line, font_sizes[-1])),
    )
    return FittedTextLine(text=line, size=size, width=width)


@trace
def fit_text(
    bounding_width: float,
    text: str,
    measure: Measure,
    font_sizes: Sequence[int] = DEFAULT_CONFIG.font_sizes,
) -> list[FittedTextLine]:
    """Size every line of *text* to stay under *bounding_width*.

    Each line gets the first entry of *font_sizes* (in list order, not
    numeric order) whose measured width is strictly below the bound, or the
    last entry when nothing fits.

    Raises:
        EmptyInput: *text* is empty.
    """
    if not text:
        raise EmptyInput("cannot fit an empty string")
    return [_fit_line(line, bounding_width, measure, font_sizes) for line in text.split("\n")]
