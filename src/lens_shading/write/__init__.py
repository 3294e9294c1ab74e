from .channel_dump import render_channel_dumps
from .tables import (
    BINARY_FILENAME,
    HEADER_FILENAME,
    TEXT_FILENAME,
    render_binary,
    render_header,
    render_text,
)

__all__ = [
    "render_channel_dumps",
    "BINARY_FILENAME",
    "HEADER_FILENAME",
    "TEXT_FILENAME",
    "render_binary",
    "render_header",
    "render_text",
]
