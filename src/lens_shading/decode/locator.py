from __future__ import annotations

from dataclasses import dataclass
import logging

from .base import ByteView, MissingHeaderError


logger = logging.getLogger(__name__)

BRCM_MAGIC = b"BRCM"
JPEG_SOI = b"\xff\xd8"
RAW_MAGIC_OFFSET = 0


@dataclass(frozen=True)
class HeaderCandidate:
    sensor_model: str
    raw_size: int


# Size of the BRCM block raspistill appends to a JPEG, per sensor.
# Tried in order; the first offset carrying the magic wins.
KNOWN_RAW_TRAILERS: tuple[HeaderCandidate, ...] = (
    HeaderCandidate(sensor_model="ov5647", raw_size=6404096),
    HeaderCandidate(sensor_model="imx219", raw_size=10270208),
    HeaderCandidate(sensor_model="imx477", raw_size=18711040),
)


def locate_header(
    view: ByteView,
    candidates: tuple[HeaderCandidate, ...] = KNOWN_RAW_TRAILERS,
) -> int:
    """Return the offset of the BRCM magic inside `view`.

    JPEG+raw composites are checked against the known trailer sizes; anything
    else (and a JPEG no candidate matches) must carry the magic at
    RAW_MAGIC_OFFSET.
    """

    size = len(view)
    if view.startswith(JPEG_SOI):
        for candidate in candidates:
            offset = size - candidate.raw_size
            if offset < 0:
                continue
            if view.startswith(BRCM_MAGIC, offset):
                logger.debug(
                    "found %s raw trailer at offset %d", candidate.sensor_model, offset
                )
                return offset
        logger.debug("no known raw trailer matched JPEG input of %d bytes", size)

    if view.startswith(BRCM_MAGIC, RAW_MAGIC_OFFSET):
        return RAW_MAGIC_OFFSET

    raise MissingHeaderError("raw file missing BRCM header")
