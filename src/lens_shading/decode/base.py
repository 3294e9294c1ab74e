from __future__ import annotations

from typing import Any

import numpy as np


class LensShadingError(RuntimeError):
    pass


class InputUnavailableError(LensShadingError):
    pass


class InvalidParameterError(LensShadingError, ValueError):
    pass


class DecodeError(LensShadingError):
    pass


class MissingHeaderError(DecodeError):
    pass


class UnsupportedFormatError(DecodeError):
    pass


class TruncatedDataError(DecodeError):
    pass


class ByteView:
    """Read-only window over the input bytes.

    Every access is checked against the window length so a short capture
    surfaces as TruncatedDataError instead of an IndexError deep in numpy.
    """

    def __init__(self, buffer: Any, offset: int = 0, length: int | None = None) -> None:
        self._mem = memoryview(buffer).cast("B")
        total = len(self._mem)
        if offset < 0 or offset > total:
            raise TruncatedDataError(f"view offset {offset} outside buffer of {total} bytes")
        if length is None:
            length = total - offset
        if length < 0 or offset + length > total:
            raise TruncatedDataError(f"view [{offset}, {offset + length}) outside buffer of {total} bytes")
        self._offset = offset
        self._length = length

    def __len__(self) -> int:
        return self._length

    def _check(self, start: int, size: int) -> None:
        if start < 0 or size < 0 or start + size > self._length:
            raise TruncatedDataError(
                f"read of {size} bytes at {start} exceeds {self._length} available bytes"
            )

    def read(self, start: int, size: int) -> bytes:
        self._check(start, size)
        base = self._offset + start
        return self._mem[base : base + size].tobytes()

    def startswith(self, prefix: bytes, start: int = 0) -> bool:
        if start < 0 or start + len(prefix) > self._length:
            return False
        base = self._offset + start
        return self._mem[base : base + len(prefix)] == prefix

    def rows(self, start: int, count: int, stride: int, row_bytes: int) -> np.ndarray:
        self._check(start, (count - 1) * stride + row_bytes)
        return np.ndarray(
            shape=(count, row_bytes),
            dtype=np.uint8,
            buffer=self._mem,
            offset=self._offset + start,
            strides=(stride, 1),
        )
