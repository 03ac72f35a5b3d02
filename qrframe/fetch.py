"""Logo fetch and decode: the one asynchronous step of a render."""

import asyncio
import io
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx
from PIL import Image, UnidentifiedImageError

from qrframe.errors import LogoUnavailable
from qrframe.logging import audit, get_logger, trace

log = get_logger("fetch")


async def _read_http(url: str, client: httpx.AsyncClient | None, timeout: float) -> bytes:
    if client is not None:
        response = await client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.content
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        response = await own_client.get(url, follow_redirects=True)
        response.raise_for_status()
        return response.content


def _decode(raw: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(raw))
    img.load()
    return img.convert("RGBA")


@trace
async def fetch_logo(source: str, client: httpx.AsyncClient | None = None, timeout: float = 10.0) -> Image.Image:
    """Fetch and decode the logo at *source* (http(s) URL, file:// URL or path).

    Returns:
        The decoded image in RGBA mode.

    Raises:
        LogoUnavailable: transport error, non-2xx status, missing file or
            undecodable or oversized image.
    """
    parsed = urlparse(source)
    try:
        if parsed.scheme in ("http", "https"):
            raw = await _read_http(source, client, timeout)
        else:
            path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(source)
            raw = await asyncio.to_thread(path.read_bytes)
        img = _decode(raw)
    except (httpx.HTTPError, OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as exc:
        audit("logo.unavailable", logger=log, source=source, error=str(exc))
        raise LogoUnavailable(f"cannot load logo from {source}: {exc}", source=source) from exc

    audit("logo.fetched", logger=log, source=source, size=f"{img.size[0]}x{img.size[1]}")
    return img
