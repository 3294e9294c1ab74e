from __future__ import annotations

from pathlib import Path
import struct

import numpy as np

from lens_shading.decode import ChannelPlanes
from lens_shading.shading import GainTable
from lens_shading.write import (
    render_binary,
    render_channel_dumps,
    render_header,
    render_text,
)


def _table() -> GainTable:
    gains = np.arange(4 * 2 * 3, dtype=np.uint8).reshape(4, 2, 3) + 32
    return GainTable(
        gains=gains,
        block_sums=np.ones((4, 2, 3), dtype=np.int64),
        raw_channels=(3, 2, 1, 0),
        transform=7,
        block_size=4,
    )


def test_binary_table_layout() -> None:
    data = render_binary(_table())
    assert struct.unpack_from("<3I", data, 0) == (7, 3, 2)
    assert len(data) == 12 + 4 * 2 * 3
    assert list(data[12:18]) == [32, 33, 34, 35, 36, 37]
    assert data[-1] == 32 + 23


def test_text_table_lines() -> None:
    lines = render_text(_table()).splitlines()
    assert len(lines) == 4 * 2 * 3
    assert lines[0] == "16 16 32 0"
    assert lines[2] == "80 16 34 0"
    assert lines[3] == "16 48 35 0"
    assert lines[-1] == "80 48 55 3"


def test_header_snippet() -> None:
    text = render_header(_table())
    lines = text.splitlines()
    assert lines[0] == "uint8_t ls_grid[] = {"
    assert lines[1] == "//R - Ch 3"
    assert lines[2] == "32, 33, 34, 35, 36, 37,"
    assert lines[3] == "//Gr - Ch 2"
    assert lines[7] == "//B - Ch 0"
    assert lines[-4] == "};"
    assert lines[-3] == "uint32_t ref_transform = 7;"
    assert lines[-2] == "uint32_t grid_width = 3;"
    assert lines[-1] == "uint32_t grid_height = 2;"


def test_channel_dumps_are_little_endian_uint16(tmp_path: Path) -> None:
    arrays = tuple(np.full((2, 3), 0x0102 * (idx + 1), dtype=np.uint16) for idx in range(4))
    planes = ChannelPlanes(planes=arrays)  # type: ignore[arg-type]

    rendered = render_channel_dumps(tmp_path, planes)
    assert [path for path, _ in rendered] == [tmp_path / f"ch{idx}.bin" for idx in range(1, 5)]
    assert not list(tmp_path.iterdir())
    data = rendered[1][1]
    assert len(data) == 2 * 3 * 2
    assert data[:2] == bytes([0x04, 0x02])
