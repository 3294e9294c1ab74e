from __future__ import annotations

import numpy as np
import pytest

from lens_shading.decode import (
    ByteView,
    TruncatedDataError,
    black_level_correct,
    parse_header,
    unpack_bayer,
)

from brcm_factory import RAW10, RAW12, build_brcm, flat_frame, pack_raw10


def _unpack(buf: bytes, black_level: int = 0):
    view = ByteView(buf)
    _, geometry = parse_header(view, 0)
    return unpack_bayer(view, 0, geometry, black_level)


def test_black_level_correct_identity_for_zero_black() -> None:
    for max_value in (1023, 4095):
        values = np.arange(max_value + 1)
        assert np.array_equal(black_level_correct(values, 0, max_value), values)


def test_black_level_correct_scales_to_full_range() -> None:
    assert int(black_level_correct(64, 64, 1023)) == 0
    assert int(black_level_correct(1023, 64, 1023)) == 1023
    assert int(black_level_correct(543, 64, 1023)) == (543 - 64) * 1023 // (1023 - 64)


def test_black_level_correct_clamps_below_black() -> None:
    assert int(black_level_correct(10, 64, 1023)) == 0


def test_raw10_low_bits_most_significant_pair_first() -> None:
    row = np.array([0x80, 0x40, 0x20, 0x10, 0b11100100], dtype=np.uint8)
    buf = build_brcm(packed_rows=np.stack([row, row]), width=4, height=2, bayer_format=RAW10)
    planes = _unpack(buf)
    assert planes[0].tolist() == [[515, 129]]
    assert planes[1].tolist() == [[258, 64]]


def test_raw12_nibble_split() -> None:
    row = np.array([0xAB, 0xCD, 0xEF, 0x12, 0x34, 0x56], dtype=np.uint8)
    buf = build_brcm(packed_rows=np.stack([row, row]), width=4, height=2, bayer_format=RAW12)
    planes = _unpack(buf)
    assert planes[0].tolist() == [[0xABE, 0x125]]
    assert planes[1].tolist() == [[0xCDF, 0x346]]
    assert planes[2].tolist() == [[0xABE, 0x125]]
    assert planes[3].tolist() == [[0xCDF, 0x346]]


@pytest.mark.parametrize("bayer_format", [RAW10, RAW12])
def test_rows_and_columns_route_to_channels(bayer_format: int) -> None:
    height, width = 8, 16
    y, x = np.indices((height, width))
    channel = (y % 2) * 2 + (x % 2)
    samples = channel * 100 + (y // 2) * 10 + (x // 2)
    buf = build_brcm(samples, bayer_format=bayer_format)

    planes = _unpack(buf)
    assert len(planes) == 4
    py, px = np.indices((height // 2, width // 2))
    for idx in range(4):
        assert planes[idx].shape == (height // 2, width // 2)
        assert np.array_equal(planes[idx], idx * 100 + py * 10 + px)


def test_flat_field_planes_are_uniform() -> None:
    planes = _unpack(build_brcm(flat_frame(64, 64, 512)))
    for plane in planes:
        assert plane.shape == (32, 32)
        assert np.all(plane == 512)


def test_black_level_applied_per_sample() -> None:
    planes = _unpack(build_brcm(flat_frame(8, 4, 576)), black_level=64)
    expected = (576 - 64) * 1023 // (1023 - 64)
    for plane in planes:
        assert np.all(plane == expected)


def test_padding_changes_row_stride() -> None:
    samples = np.arange(8 * 4, dtype=np.uint16).reshape(4, 8) * 7
    plain = _unpack(build_brcm(samples))
    padded = _unpack(build_brcm(samples, padding_right=96))
    for a, b in zip(plain, padded):
        assert np.array_equal(a, b)


def test_truncated_pixel_data() -> None:
    buf = build_brcm(flat_frame(64, 64, 512))
    with pytest.raises(TruncatedDataError):
        _unpack(buf[:-40])


def test_unpacking_is_repeatable() -> None:
    rng = np.random.default_rng(7)
    samples = rng.integers(0, 1024, size=(16, 32), dtype=np.uint16)
    buf = build_brcm(samples)
    first = _unpack(buf, black_level=16)
    second = _unpack(buf, black_level=16)
    for a, b in zip(first, second):
        assert np.array_equal(a, b)


def test_last_raw10_group_may_end_past_stride() -> None:
    # Width 50 has a 64-byte stride while its 13th five-byte group ends at byte 65.
    rng = np.random.default_rng(3)
    samples = rng.integers(0, 1024, size=(4, 52), dtype=np.uint16)
    packed = pack_raw10(samples)[:, :64]
    buf = build_brcm(packed_rows=packed, width=50, height=4)
    assert len(buf) == 32768 + 4 * 64

    planes = _unpack(buf)
    assert planes[0].shape == (2, 25)
    assert np.array_equal(planes[0][:, :24], samples[0::2, 0:48:2])
    assert np.array_equal(planes[3][:, :24], samples[1::2, 1:48:2])
    assert np.array_equal(planes[0][:, 24], samples[0::2, 48] & 0x3FC)
