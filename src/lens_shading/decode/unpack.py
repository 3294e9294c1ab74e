from __future__ import annotations

import logging

import numpy as np

from .base import ByteView
from .header import PIXEL_DATA_OFFSET
from .types import ChannelPlanes, FrameGeometry


logger = logging.getLogger(__name__)

# Low-bit pairs in the raw10 fifth byte, most significant pair first.
_RAW10_LSB_SHIFTS = np.array([6, 4, 2, 0], dtype=np.uint16)


def black_level_correct(raw: np.ndarray | int, black_level: int, max_value: int) -> np.ndarray:
    values = np.asarray(raw, dtype=np.int32)
    corrected = (values - black_level) * max_value // (max_value - black_level)
    return np.clip(corrected, 0, max_value)


def packed_row_bytes(width: int, bits_per_sample: int) -> int:
    if bits_per_sample == 10:
        return ((width + 3) // 4) * 5
    return ((width + 1) // 2) * 3


def _pad_to_groups(rows: np.ndarray, group: int) -> np.ndarray:
    # The last group may run past the row stride; its missing bytes read as zero.
    short = -rows.shape[1] % group
    if short:
        rows = np.pad(rows, ((0, 0), (0, short)))
    return rows


def _unpack_raw10(rows: np.ndarray) -> np.ndarray:
    count = rows.shape[0]
    rows = _pad_to_groups(rows, 5)
    groups = rows.reshape(count, -1, 5).astype(np.uint16)
    msb = groups[..., :4] << 2
    low = (groups[..., 4:5] >> _RAW10_LSB_SHIFTS) & 0x3
    return (msb | low).reshape(count, -1)


def _unpack_raw12(rows: np.ndarray) -> np.ndarray:
    count = rows.shape[0]
    rows = _pad_to_groups(rows, 3)
    groups = rows.reshape(count, -1, 3).astype(np.uint16)
    first = (groups[..., 0] << 4) | (groups[..., 2] >> 4)
    second = (groups[..., 1] << 4) | (groups[..., 2] & 0x0F)
    return np.stack([first, second], axis=-1).reshape(count, -1)


def unpack_bayer(
    view: ByteView,
    header_offset: int,
    geometry: FrameGeometry,
    black_level: int,
) -> ChannelPlanes:
    """Split packed Bayer rows into four black-level corrected planes.

    Even rows feed channels 0/1 and odd rows channels 2/3, alternating by
    column parity. A trailing odd row or column has no partner and is
    dropped.
    """

    half_w = geometry.half_width
    half_h = geometry.half_height
    row_count = half_h * 2
    row_bytes = packed_row_bytes(geometry.width, geometry.bits_per_sample)

    rows = view.rows(
        start=header_offset + PIXEL_DATA_OFFSET,
        count=row_count,
        stride=geometry.stride,
        row_bytes=min(row_bytes, geometry.stride),
    )

    if geometry.bits_per_sample == 10:
        samples = _unpack_raw10(rows)
    else:
        samples = _unpack_raw12(rows)
    samples = samples[:, : half_w * 2]

    corrected = black_level_correct(samples, black_level, geometry.max_value).astype(np.uint16)
    even = corrected[0::2]
    odd = corrected[1::2]
    planes = (
        np.ascontiguousarray(even[:, 0::2]),
        np.ascontiguousarray(even[:, 1::2]),
        np.ascontiguousarray(odd[:, 0::2]),
        np.ascontiguousarray(odd[:, 1::2]),
    )
    logger.debug(
        "unpacked %d rows of %d-bit data into 4 planes of %dx%d",
        row_count,
        geometry.bits_per_sample,
        half_w,
        half_h,
    )
    return ChannelPlanes(planes=planes)
