import io

import httpx
import pytest
from PIL import Image

from qrframe.errors import LogoUnavailable
from qrframe.fetch import fetch_logo


def _png_bytes(size=(64, 32), color=(0, 0, 255)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpFetch:
    async def test_decodes_png(self):
        async with _client(lambda request: httpx.Response(200, content=_png_bytes())) as client:
            img = await fetch_logo("https://cdn.example.com/logo.png", client=client)
        assert img.size == (64, 32)
        assert img.mode == "RGBA"

    async def test_http_error_status(self):
        async with _client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(LogoUnavailable) as excinfo:
                await fetch_logo("https://cdn.example.com/missing.png", client=client)
        assert excinfo.value.source == "https://cdn.example.com/missing.png"
        assert excinfo.value.canvas is None

    async def test_transport_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(refuse) as client:
            with pytest.raises(LogoUnavailable):
                await fetch_logo("https://down.example.com/logo.png", client=client)

    async def test_undecodable_body(self):
        async with _client(lambda request: httpx.Response(200, content=b"<html>nope</html>")) as client:
            with pytest.raises(LogoUnavailable):
                await fetch_logo("https://cdn.example.com/logo.png", client=client)


class TestFileFetch:
    async def test_plain_path(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(_png_bytes((10, 20)))
        img = await fetch_logo(str(path))
        assert img.size == (10, 20)

    async def test_file_url(self, tmp_path):
        path = tmp_path / "logo.png"
        path.write_bytes(_png_bytes((12, 12)))
        img = await fetch_logo(path.as_uri())
        assert img.size == (12, 12)

    async def test_missing_file(self, tmp_path):
        with pytest.raises(LogoUnavailable):
            await fetch_logo(str(tmp_path / "absent.png"))

    async def test_oversized_image(self, tmp_path, monkeypatch):
        path = tmp_path / "huge.png"
        path.write_bytes(_png_bytes((64, 64)))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)
        with pytest.raises(LogoUnavailable) as excinfo:
            await fetch_logo(str(path))
        assert excinfo.value.source == str(path)
