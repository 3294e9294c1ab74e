from __future__ import annotations

import logging
import struct

from .base import ByteView, InvalidParameterError, UnsupportedFormatError
from .types import BayerOrder, FrameGeometry, RawHeader


logger = logging.getLogger(__name__)

# Values from the VideoCore image type definitions.
BRCM_FORMAT_BAYER = 33
BRCM_BAYER_RAW10 = 3
BRCM_BAYER_RAW12 = 4
SUPPORTED_BAYER_FORMATS = (BRCM_BAYER_RAW10, BRCM_BAYER_RAW12)

SENSOR_MODEL_OFFSET = 16
SENSOR_MODEL_LENGTH = 6
HEADER_BLOCK_OFFSET = 0xB0
PIXEL_DATA_OFFSET = 32768

# name, width, height, padding_right, padding_down, 24 reserved bytes,
# transform, format, bayer_order, bayer_format
_HEADER_STRUCT = struct.Struct("<32s4H24x2H2B")

DEFAULT_BLACK_LEVELS: dict[str, int] = {
    "imx219": 64,
    "ov5647": 16,
    "imx477": 257,
    "testc": 257,
}
FALLBACK_BLACK_LEVEL = 16


def _c_string(raw: bytes) -> str:
    return raw.split(b"\x00", 1)[0].decode("ascii", errors="replace")


def _round_up32(value: int) -> int:
    return (value + 31) & ~31


def row_stride(width: int, padding_right: int, bits_per_sample: int) -> int:
    bytes_per_4px = 5 if bits_per_sample == 10 else 6
    return _round_up32(((width + padding_right) * bytes_per_4px + 3) >> 2)


def parse_header(view: ByteView, header_offset: int) -> tuple[RawHeader, FrameGeometry]:
    model = _c_string(view.read(header_offset + SENSOR_MODEL_OFFSET, SENSOR_MODEL_LENGTH))
    fields = _HEADER_STRUCT.unpack(
        view.read(header_offset + HEADER_BLOCK_OFFSET, _HEADER_STRUCT.size)
    )
    name, width, height, pad_right, pad_down, transform, fmt, order, bayer_fmt = fields

    logger.info(
        "header decoding: mode %s, width %d, height %d, padding %d %d",
        _c_string(name),
        width,
        height,
        pad_right,
        pad_down,
    )
    logger.info(
        "transform %d, image format %d, bayer order %d, bayer format %d",
        transform,
        fmt,
        order,
        bayer_fmt,
    )

    if fmt != BRCM_FORMAT_BAYER or bayer_fmt not in SUPPORTED_BAYER_FORMATS:
        raise UnsupportedFormatError(
            f"raw file is not Bayer raw10 or raw12 (format={fmt}, bayer_format={bayer_fmt})"
        )
    if width < 2 or height < 2:
        raise UnsupportedFormatError(f"frame of {width}x{height} has no complete Bayer quad")
    try:
        bayer_order = BayerOrder(order)
    except ValueError as exc:
        raise UnsupportedFormatError(f"unknown bayer order {order}") from exc

    header = RawHeader(
        sensor_model=model,
        name=_c_string(name),
        width=width,
        height=height,
        padding_right=pad_right,
        padding_down=pad_down,
        transform=transform,
        format=fmt,
        bayer_order=bayer_order,
        bayer_format=bayer_fmt,
    )

    bits = bayer_fmt * 2 + 4
    geometry = FrameGeometry(
        width=width,
        height=height,
        bits_per_sample=bits,
        max_value=(1 << bits) - 1,
        stride=row_stride(width, pad_right, bits),
    )
    return header, geometry


def resolve_black_level(header: RawHeader, geometry: FrameGeometry, explicit: int | None = None) -> int:
    if explicit is not None:
        black_level = int(explicit)
    else:
        black_level = DEFAULT_BLACK_LEVELS.get(header.sensor_model, FALLBACK_BLACK_LEVEL)
        if header.sensor_model in DEFAULT_BLACK_LEVELS:
            logger.info("sensor type: %s", header.sensor_model)

    if black_level < 0 or black_level >= geometry.max_value:
        raise InvalidParameterError(
            f"black level {black_level} outside [0, {geometry.max_value}) for "
            f"{geometry.bits_per_sample}-bit data"
        )
    logger.info("black level: %d", black_level)
    return black_level
