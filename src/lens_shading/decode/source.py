from __future__ import annotations

from contextlib import contextmanager
import logging
import mmap
from pathlib import Path
from typing import Iterator

from .base import InputUnavailableError


logger = logging.getLogger(__name__)


@contextmanager
def open_raw(path: Path) -> Iterator[mmap.mmap | bytes]:
    try:
        f = path.open("rb")
    except OSError as exc:
        raise InputUnavailableError(f"failed to open {path}: {exc}") from exc

    with f:
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise InputUnavailableError(f"failed to stat {path}: {exc}") from exc
        logger.info("file size is %d", size)

        # mmap refuses zero-length files; the locator reports those as headerless.
        if size == 0:
            yield b""
            return

        try:
            mapped = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
        except (OSError, ValueError) as exc:
            raise InputUnavailableError(f"mmap failed for {path}: {exc}") from exc

        try:
            yield mapped
        finally:
            try:
                mapped.close()
            except BufferError:
                # A traceback still references a view of the mapping; it is
                # unmapped once that view is collected.
                logger.debug("deferring unmap of %s, views still exported", path)
