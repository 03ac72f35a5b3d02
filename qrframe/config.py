"""Render configuration: the read-only constants every component shares."""

import dataclasses
from dataclasses import dataclass

# Probed in list order. 46 comes before 48 on purpose; keep the literal order.
FONT_SIZES = (
    46, 48, 44, 42, 40, 38, 36, 34, 32, 30, 28, 26, 24, 22, 20, 18, 16, 14, 12, 10, 8, 6, 4, 2, 0,
)


@dataclass(frozen=True)
class RenderConfig:
    """Immutable layout constants.

    ``DEFAULT_CONFIG`` is the padded layout with a title band and a 90% grid;
    ``CLASSIC_CONFIG`` draws the grid edge to edge with no outer band.
    """

    font_sizes: tuple[int, ...] = FONT_SIZES
    text_margin: int = 7
    margin_divisor: int = 20
    line_width_divisor: int = 100
    corner_radius: int = 20

    include_outer_padding: bool = True
    outer_padding: int = 100

    supports_title: bool = True
    title_padding_x: int = 50
    title_padding_y: int = 10
    title_background: str = "#ffd54f"

    qr_scale: float = 0.9
    qr_border_modules: int = 0
    error_correction: str = "H"

    logo_fraction: float = 1 / 3
    logo_padding_fraction: float = 1 / 6
    # share of the correctable modules the logo patch may cover
    logo_ecc_budget: float = 0.5
    logo_shrink_steps: tuple[float, ...] = (1.0, 0.7, 0.49, 0.34, 0.24)
    verify_logo_scan: bool = True

    canvas_color: str = "#ffffff"
    min_contrast: float = 3.0
    font_path: str = "DejaVuSans-Bold.ttf"

    def __post_init__(self):
        if not self.font_sizes or self.font_sizes[-1] != 0:
            raise ValueError("font_sizes must end with 0 so fitting always terminates")
        if not 0 < self.qr_scale <= 1:
            raise ValueError("qr_scale must be in (0, 1]")
        if not self.logo_shrink_steps or not all(0 < step <= 1 for step in self.logo_shrink_steps):
            raise ValueError("logo_shrink_steps must be non-empty factors in (0, 1]")

    @property
    def padding(self) -> int:
        """Total extra pixels added to each canvas axis."""
        return self.outer_padding if self.include_outer_padding else 0

    def replace(self, **changes) -> "RenderConfig":
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = RenderConfig()

CLASSIC_CONFIG = RenderConfig(
    include_outer_padding=False,
    supports_title=False,
    qr_scale=1.0,
    qr_border_modules=2,
)
