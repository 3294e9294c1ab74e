from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from lens_shading.config import AnalyseConfig, OutputFormat, normalize_block_size
from lens_shading.decode import (
    ByteView,
    ChannelPlanes,
    FrameGeometry,
    InvalidParameterError,
    RawHeader,
    locate_header,
    open_raw,
    parse_header,
    resolve_black_level,
    unpack_bayer,
)
from lens_shading.shading import GainTable, build_gain_table
from lens_shading.write import (
    BINARY_FILENAME,
    HEADER_FILENAME,
    TEXT_FILENAME,
    render_binary,
    render_channel_dumps,
    render_header,
    render_text,
)


logger = logging.getLogger(__name__)


@dataclass
class ShadingAnalysis:
    header_offset: int
    header: RawHeader
    geometry: FrameGeometry
    black_level: int
    planes: ChannelPlanes
    table: GainTable

    def summary(self) -> dict[str, Any]:
        return {
            "header_offset": self.header_offset,
            "sensor_model": self.header.sensor_model,
            "mode": self.header.name,
            "width": self.header.width,
            "height": self.header.height,
            "padding_right": self.header.padding_right,
            "padding_down": self.header.padding_down,
            "transform": self.header.transform,
            "bayer_order": self.header.bayer_order.name,
            "bits_per_sample": self.geometry.bits_per_sample,
            "stride": self.geometry.stride,
            "black_level": self.black_level,
            "block_size": self.table.block_size,
            "grid_width": self.table.grid_width,
            "grid_height": self.table.grid_height,
        }


def analyse_buffer(buffer: Any, black_level: int | None = None, block_size: int = 4) -> ShadingAnalysis:
    block_size = normalize_block_size(block_size)
    view = ByteView(buffer)
    header_offset = locate_header(view)
    header, geometry = parse_header(view, header_offset)
    level = resolve_black_level(header, geometry, black_level)
    logger.info("grid size: %d x %d", geometry.grid_width, geometry.grid_height)

    planes = unpack_bayer(view, header_offset, geometry, level)
    table = build_gain_table(planes, header.bayer_order, block_size, transform=header.transform)
    return ShadingAnalysis(
        header_offset=header_offset,
        header=header,
        geometry=geometry,
        black_level=level,
        planes=planes,
        table=table,
    )


def analyse_file(path: Path, black_level: int | None = None, block_size: int = 4) -> ShadingAnalysis:
    with open_raw(path) as buffer:
        return analyse_buffer(buffer, black_level=black_level, block_size=block_size)


def write_outputs(
    analysis: ShadingAnalysis,
    out_dir: Path,
    outputs: OutputFormat,
    channel_dump_format: str = "bin",
) -> list[Path]:
    """Write the selected outputs, or none of them if any payload fails."""

    out_dir = Path(out_dir)
    table = analysis.table
    rendered: list[tuple[Path, bytes]] = []
    if outputs & OutputFormat.HEADER:
        rendered.append((out_dir / HEADER_FILENAME, render_header(table).encode("ascii")))
    if outputs & OutputFormat.BINARY:
        rendered.append((out_dir / BINARY_FILENAME, render_binary(table)))
    if outputs & OutputFormat.TEXT:
        rendered.append((out_dir / TEXT_FILENAME, render_text(table).encode("ascii")))
    if outputs & OutputFormat.CHANNELS:
        rendered.extend(render_channel_dumps(out_dir, analysis.planes, fmt=channel_dump_format))

    out_dir.mkdir(parents=True, exist_ok=True)
    staged: list[Path] = []
    try:
        for path, payload in rendered:
            tmp = path.with_name(path.name + ".tmp")
            staged.append(tmp)
            tmp.write_bytes(payload)
    except OSError:
        for tmp in staged:
            tmp.unlink(missing_ok=True)
        raise

    written = []
    for (path, _), tmp in zip(rendered, staged):
        tmp.replace(path)
        written.append(path)
        logger.info("wrote %s", path)
    return written


def run_analysis(config: AnalyseConfig) -> tuple[ShadingAnalysis, list[Path]]:
    if config.input_path is None:
        raise InvalidParameterError("no input raw file given")

    analysis = analyse_file(
        config.input_path,
        black_level=config.black_level,
        block_size=config.block_size,
    )
    written = write_outputs(
        analysis,
        out_dir=config.output_dir,
        outputs=config.outputs,
        channel_dump_format=config.channel_dump_format,
    )
    return analysis, written
