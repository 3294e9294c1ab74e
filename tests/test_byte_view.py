from __future__ import annotations

import numpy as np
import pytest

from lens_shading.decode import ByteView, TruncatedDataError


def test_read_within_window() -> None:
    view = ByteView(bytes(range(16)), offset=4, length=8)
    assert len(view) == 8
    assert view.read(0, 3) == bytes([4, 5, 6])
    assert view.startswith(bytes([10, 11]), 6)


def test_read_past_end_is_truncated() -> None:
    view = ByteView(bytes(range(16)), offset=4, length=8)
    with pytest.raises(TruncatedDataError):
        view.read(6, 3)
    assert not view.startswith(b"\x0a\x0b\x0c", 6)


def test_window_outside_buffer() -> None:
    with pytest.raises(TruncatedDataError):
        ByteView(b"abc", offset=2, length=5)


def test_rows_are_strided_and_read_only() -> None:
    view = ByteView(bytes(range(40)))
    rows = view.rows(start=2, count=3, stride=10, row_bytes=4)
    assert rows.tolist() == [[2, 3, 4, 5], [12, 13, 14, 15], [22, 23, 24, 25]]
    assert not rows.flags.writeable
    with pytest.raises(TruncatedDataError):
        view.rows(start=2, count=4, stride=10, row_bytes=9)


def test_rows_over_writable_buffer_do_not_copy() -> None:
    buf = bytearray(20)
    rows = ByteView(buf).rows(start=0, count=2, stride=10, row_bytes=2)
    buf[10] = 7
    assert int(rows[1, 0]) == 7
    assert isinstance(rows, np.ndarray)
