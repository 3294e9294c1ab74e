from __future__ import annotations

import struct

from lens_shading.shading.grid import CHANNEL_NAMES, GainTable, cell_center


HEADER_FILENAME = "ls_table.h"
BINARY_FILENAME = "ls.bin"
TEXT_FILENAME = "ls_table.txt"

_BINARY_PREAMBLE = struct.Struct("<3I")


def render_binary(table: GainTable) -> bytes:
    preamble = _BINARY_PREAMBLE.pack(table.transform, table.grid_width, table.grid_height)
    return preamble + table.gains.astype("u1", copy=False).tobytes(order="C")


def render_text(table: GainTable) -> str:
    lines: list[str] = []
    for channel in range(table.gains.shape[0]):
        for gy in range(table.grid_height):
            for gx in range(table.grid_width):
                gain = int(table.gains[channel, gy, gx])
                lines.append(f"{cell_center(gx)} {cell_center(gy)} {gain} {channel}")
    return "\n".join(lines) + "\n"


def render_header(table: GainTable) -> str:
    out = ["uint8_t ls_grid[] = {"]
    for channel, raw_index in enumerate(table.raw_channels):
        out.append(f"//{CHANNEL_NAMES[channel]} - Ch {raw_index}")
        values = table.gains[channel].ravel()
        out.append("".join(f"{int(v)}, " for v in values).rstrip())
    out.append("};")
    out.append(f"uint32_t ref_transform = {table.transform};")
    out.append(f"uint32_t grid_width = {table.grid_width};")
    out.append(f"uint32_t grid_height = {table.grid_height};")
    return "\n".join(out) + "\n"
