from __future__ import annotations

from dataclasses import dataclass
import enum

import numpy as np


NUM_CHANNELS = 4
CELL_SIZE = 32


class BayerOrder(enum.IntEnum):
    RGGB = 0
    GBRG = 1
    BGGR = 2
    GRBG = 3


@dataclass(frozen=True)
class RawHeader:
    sensor_model: str
    name: str
    width: int
    height: int
    padding_right: int
    padding_down: int
    transform: int
    format: int
    bayer_order: BayerOrder
    bayer_format: int


@dataclass(frozen=True)
class FrameGeometry:
    width: int
    height: int
    bits_per_sample: int
    max_value: int
    stride: int

    @property
    def half_width(self) -> int:
        return self.width // 2

    @property
    def half_height(self) -> int:
        return self.height // 2

    @property
    def grid_width(self) -> int:
        return (self.half_width + CELL_SIZE - 1) // CELL_SIZE

    @property
    def grid_height(self) -> int:
        return (self.half_height + CELL_SIZE - 1) // CELL_SIZE


@dataclass
class ChannelPlanes:
    """Four half-resolution planes indexed by raw sensor-channel position."""

    planes: tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]

    def __getitem__(self, index: int) -> np.ndarray:
        return self.planes[index]

    def __len__(self) -> int:
        return len(self.planes)

    def __iter__(self):
        return iter(self.planes)
