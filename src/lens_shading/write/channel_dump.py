from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import numpy as np

from lens_shading.decode.types import ChannelPlanes


CHANNEL_DUMP_SUFFIXES = {"bin": ".bin", "tiff": ".tif"}


def channel_dump_paths(out_dir: Path, fmt: str = "bin", count: int = 4) -> list[Path]:
    suffix = CHANNEL_DUMP_SUFFIXES[fmt]
    return [out_dir / f"ch{idx + 1}{suffix}" for idx in range(count)]


def render_channel_bin(plane: np.ndarray) -> bytes:
    return np.ascontiguousarray(plane, dtype="<u2").tobytes()


def _tiff_renderer() -> Callable[[np.ndarray], bytes]:
    try:
        import tifffile  # type: ignore
    except Exception as exc:
        raise RuntimeError("tifffile is required for TIFF channel dumps. Install with: pip install '.[io]'") from exc

    def render(plane: np.ndarray) -> bytes:
        out = io.BytesIO()
        tifffile.imwrite(out, np.asarray(plane, dtype=np.uint16), photometric="minisblack")
        return out.getvalue()

    return render


def render_channel_dumps(out_dir: Path, planes: ChannelPlanes, fmt: str = "bin") -> list[tuple[Path, bytes]]:
    render = _tiff_renderer() if fmt == "tiff" else render_channel_bin
    paths = channel_dump_paths(out_dir, fmt=fmt, count=len(planes))
    return [(path, render(plane)) for path, plane in zip(paths, planes)]
