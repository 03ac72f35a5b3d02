import pytest

from qrframe.config import CLASSIC_CONFIG, DEFAULT_CONFIG, RenderConfig
from qrframe.errors import InvalidColor
from qrframe.models import CaptionPosition, FrameSpec, FrameStyle, LogoSpec, RenderRequest


class TestRenderRequest:
    def test_defaults(self):
        request = RenderRequest(text="hello", width=200)
        assert request.dark == "#000000"
        assert request.light == "#ffffff"
        assert not request.wants_logo

    def test_colours_normalised(self):
        request = RenderRequest(text="hello", width=200, dark_color="#ABC", light_color=(255, 255, 240))
        assert request.dark_color == "#aabbcc"
        assert request.light_color == "#fffff0"

    def test_invalid_colour_rejected_up_front(self):
        with pytest.raises(InvalidColor):
            RenderRequest(text="hello", width=200, dark_color=(300, 0, 0))
        with pytest.raises(InvalidColor):
            FrameSpec(style="square", color="nope")

    def test_disabled_logo_not_wanted(self):
        request = RenderRequest(text="x", width=100, logo=LogoSpec(url="https://example.com/a.png", enabled=False))
        assert not request.wants_logo

    def test_from_dict_loose_shape(self):
        request = RenderRequest.from_dict({
            "text": "https://example.com",
            "darkColorHex": "#112233",
            "width": 300,
            "frame": {
                "style": "rounded",
                "position": "top",
                "text": "Scan me",
                "color": {"rgba": {"r": 255, "g": 0, "b": 0}},
                "backgroundColor": {"rgba": {"r": 250, "g": 250, "b": 250}},
            },
            "logo": {"logo": {"url": "https://example.com/logo.png"}},
        })
        assert request.dark_color == "#112233"
        assert request.frame.style is FrameStyle.ROUNDED
        assert request.frame.position is CaptionPosition.TOP
        assert request.frame.border_color == "#ff0000"
        assert request.frame.fill_color == "#fafafa"
        assert request.logo == LogoSpec(url="https://example.com/logo.png")

    def test_from_dict_minimal(self):
        request = RenderRequest.from_dict({"text": "abc", "width": 120, "logo": {"logo": None}})
        assert request.frame is None
        assert request.logo is None


class TestFrameSpec:
    def test_defaults(self):
        frame = FrameSpec()
        assert frame.style is FrameStyle.NONE
        assert frame.position is CaptionPosition.BOTTOM
        assert frame.border_color == "#000000"
        assert frame.fill_color == "#ffffff"

    def test_unknown_style(self):
        with pytest.raises(ValueError):
            FrameSpec(style="wavy")


class TestRenderConfig:
    def test_variants(self):
        assert DEFAULT_CONFIG.padding == 100
        assert CLASSIC_CONFIG.padding == 0
        assert not CLASSIC_CONFIG.supports_title

    def test_font_sizes_must_end_with_zero(self):
        with pytest.raises(ValueError):
            RenderConfig(font_sizes=(20, 10))

    def test_replace_returns_copy(self):
        tweaked = DEFAULT_CONFIG.replace(text_margin=3)
        assert tweaked.text_margin == 3
        assert DEFAULT_CONFIG.text_margin == 7
