from .base import (
    ByteView,
    DecodeError,
    InputUnavailableError,
    InvalidParameterError,
    LensShadingError,
    MissingHeaderError,
    TruncatedDataError,
    UnsupportedFormatError,
)
from .header import parse_header, resolve_black_level
from .locator import KNOWN_RAW_TRAILERS, HeaderCandidate, locate_header
from .source import open_raw
from .types import BayerOrder, ChannelPlanes, FrameGeometry, RawHeader
from .unpack import black_level_correct, unpack_bayer

__all__ = [
    "ByteView",
    "DecodeError",
    "InputUnavailableError",
    "InvalidParameterError",
    "LensShadingError",
    "MissingHeaderError",
    "TruncatedDataError",
    "UnsupportedFormatError",
    "parse_header",
    "resolve_black_level",
    "KNOWN_RAW_TRAILERS",
    "HeaderCandidate",
    "locate_header",
    "open_raw",
    "BayerOrder",
    "ChannelPlanes",
    "FrameGeometry",
    "RawHeader",
    "black_level_correct",
    "unpack_bayer",
]
