"""Render error taxonomy."""

from PIL import Image


class QrFrameError(Exception):
    """Base error carrying a machine-readable code."""

    code = "ERR_QRFRAME"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class InvalidColor(QrFrameError):
    code = "ERR_INVALID_COLOR"


class EmptyInput(QrFrameError):
    code = "ERR_EMPTY_INPUT"


class LayoutOverflow(QrFrameError):
    code = "ERR_LAYOUT_OVERFLOW"


class LogoUnavailable(QrFrameError):
    """The logo could not be fetched or decoded.

    Raised only after every other layer has been drawn. ``canvas`` holds that
    pre-logo image when the failure happened inside a render, so callers can
    still ship a scannable code.
    """

    code = "ERR_LOGO_UNAVAILABLE"

    def __init__(self, message: str, source: str | None = None, canvas: Image.Image | None = None):
        super().__init__(message)
        self.source = source
        self.canvas = canvas
