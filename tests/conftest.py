"""Shared fixtures: deterministic text measurement and in-memory logos."""

import pytest
from PIL import Image

from qrframe.errors import LogoUnavailable


def fake_measure(text: str, size: int) -> float:
    """Every glyph is half as wide as the font size."""
    return len(text) * size * 0.5


@pytest.fixture
def measure():
    return fake_measure


@pytest.fixture
def red_logo():
    return Image.new("RGBA", (400, 200), (255, 0, 0, 255))


@pytest.fixture
def logo_loader(red_logo):
    calls = []

    async def load(source):
        calls.append(source)
        return red_logo

    load.calls = calls
    return load


@pytest.fixture
def failing_loader():
    async def load(source):
        raise LogoUnavailable("unreachable", source=source)

    return load
