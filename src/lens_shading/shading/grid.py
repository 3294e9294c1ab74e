from __future__ import annotations

from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import Mapping

import numpy as np

from lens_shading.decode.types import CELL_SIZE, BayerOrder, ChannelPlanes


logger = logging.getLogger(__name__)

GAIN_UNITY = 32
GAIN_MAX = 255
GAIN_FRACTION_BITS = 5

CHANNEL_NAMES: tuple[str, ...] = ("R", "Gr", "Gb", "B")

# Raw plane index feeding each logical channel (R, Gr, Gb, B).
CHANNEL_ORDERING: Mapping[BayerOrder, tuple[int, int, int, int]] = MappingProxyType(
    {
        BayerOrder.RGGB: (0, 1, 2, 3),
        BayerOrder.GBRG: (2, 3, 0, 1),
        BayerOrder.BGGR: (3, 2, 1, 0),
        BayerOrder.GRBG: (1, 0, 3, 2),
    }
)


@dataclass(frozen=True)
class GainTable:
    gains: np.ndarray
    block_sums: np.ndarray
    raw_channels: tuple[int, int, int, int]
    transform: int
    block_size: int

    @property
    def grid_height(self) -> int:
        return int(self.gains.shape[1])

    @property
    def grid_width(self) -> int:
        return int(self.gains.shape[2])


def grid_shape(plane_height: int, plane_width: int) -> tuple[int, int]:
    return (
        (plane_height + CELL_SIZE - 1) // CELL_SIZE,
        (plane_width + CELL_SIZE - 1) // CELL_SIZE,
    )


def cell_center(index: int) -> int:
    return index * CELL_SIZE + CELL_SIZE // 2


def analysis_window(index: int, block_size: int, extent: int) -> tuple[int, int]:
    # Cells hanging off the plane edge get a smaller, partial window.
    start = cell_center(index) - block_size // 2
    if start >= extent:
        start = extent - 1
    stop = min(start + block_size, extent)
    return start, stop


def block_sums(plane: np.ndarray, block_size: int) -> np.ndarray:
    height, width = plane.shape
    grid_h, grid_w = grid_shape(height, width)
    full_px = block_size * block_size
    sums = np.empty((grid_h, grid_w), dtype=np.int64)

    for gy in range(grid_h):
        y_start, y_stop = analysis_window(gy, block_size, height)
        for gx in range(grid_w):
            x_start, x_stop = analysis_window(gx, block_size, width)
            window = plane[y_start:y_stop, x_start:x_stop]
            total = int(window.sum(dtype=np.int64))
            block_px = window.size
            if block_px < full_px:
                total = total * full_px // block_px
            sums[gy, gx] = max(total, 1)
    return sums


def gains_from_block_sums(sums: np.ndarray) -> np.ndarray:
    sums = np.asarray(sums, dtype=np.int64)
    reference = int(sums.max()) << GAIN_FRACTION_BITS
    gains = (2 * reference + sums) // (2 * sums)
    return np.clip(gains, GAIN_UNITY, GAIN_MAX).astype(np.uint8)


def compute_gain_grid(plane: np.ndarray, block_size: int) -> tuple[np.ndarray, np.ndarray]:
    sums = block_sums(plane, block_size)
    return gains_from_block_sums(sums), sums


def build_gain_table(
    planes: ChannelPlanes,
    bayer_order: BayerOrder,
    block_size: int,
    transform: int = 0,
) -> GainTable:
    raw_channels = CHANNEL_ORDERING[BayerOrder(bayer_order)]
    gains = []
    sums = []
    for logical, raw_index in enumerate(raw_channels):
        channel_gains, channel_sums = compute_gain_grid(planes[raw_index], block_size)
        logger.debug(
            "%s (ch %d): gain range %d..%d",
            CHANNEL_NAMES[logical],
            raw_index,
            int(channel_gains.min()),
            int(channel_gains.max()),
        )
        gains.append(channel_gains)
        sums.append(channel_sums)
    return GainTable(
        gains=np.stack(gains),
        block_sums=np.stack(sums),
        raw_channels=raw_channels,
        transform=int(transform),
        block_size=block_size,
    )
