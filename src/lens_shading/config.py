from __future__ import annotations

from dataclasses import dataclass
import enum
from pathlib import Path
from typing import Any

from lens_shading.decode.base import InvalidParameterError


DEFAULT_BLOCK_SIZE = 4
MAX_BLOCK_SIZE = 32


class OutputFormat(enum.IntFlag):
    HEADER = 1
    BINARY = 2
    TEXT = 4
    CHANNELS = 8


ALL_OUTPUTS = OutputFormat.HEADER | OutputFormat.BINARY | OutputFormat.TEXT | OutputFormat.CHANNELS
CHANNEL_DUMP_FORMATS = ("bin", "tiff")


@dataclass
class AnalyseConfig:
    input_path: Path | None = None
    black_level: int | None = None
    block_size: int = DEFAULT_BLOCK_SIZE
    output_mask: int = int(OutputFormat.HEADER)
    output_dir: Path = Path(".")
    channel_dump_format: str = "bin"
    log_level: str = "INFO"
    log_file: Path | None = None

    @property
    def outputs(self) -> OutputFormat:
        return OutputFormat(self.output_mask & int(ALL_OUTPUTS))


def normalize_block_size(value: int) -> int:
    size = int(value)
    if size <= 0 or size > MAX_BLOCK_SIZE:
        raise InvalidParameterError(f"analysis cell size {size} out of range (2..{MAX_BLOCK_SIZE})")
    if size % 2 == 1:
        size += 1
    return size


def validate_output_mask(value: int) -> int:
    mask = int(value)
    if mask < 0 or not mask & int(ALL_OUTPUTS):
        raise InvalidParameterError(f"invalid output format {mask}")
    return mask


def validate_black_level(value: int | None) -> int | None:
    if value is None:
        return None
    level = int(value)
    if level < 0:
        raise InvalidParameterError(f"black level must be non-negative, got {level}")
    return level


def _expand_path(value: str | None, base: Path) -> Path | None:
    if value in (None, ""):
        return None
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = (base / path).resolve()
    return path


def _optional_int(raw: dict[str, Any], key: str) -> int | None:
    value = raw.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"config key {key} must be an integer, got {value!r}") from exc


def finalize_config(config: AnalyseConfig) -> AnalyseConfig:
    config.black_level = validate_black_level(config.black_level)
    config.block_size = normalize_block_size(config.block_size)
    config.output_mask = validate_output_mask(config.output_mask)
    if config.channel_dump_format not in CHANNEL_DUMP_FORMATS:
        raise InvalidParameterError(
            f"channel_dump_format must be one of {', '.join(CHANNEL_DUMP_FORMATS)}, "
            f"got {config.channel_dump_format!r}"
        )
    return config


def load_config(path: str | Path) -> AnalyseConfig:
    try:
        import yaml  # type: ignore
    except Exception as exc:
        raise RuntimeError("PyYAML is required for config loading. Install with: pip install PyYAML") from exc

    cfg_path = Path(path).expanduser().resolve()
    with cfg_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise InvalidParameterError(f"config {cfg_path} must be a mapping")

    base = cfg_path.parent
    block_size = _optional_int(raw, "block_size")
    output_mask = _optional_int(raw, "output_mask")

    config = AnalyseConfig(
        input_path=_expand_path(raw.get("input"), base),
        black_level=_optional_int(raw, "black_level"),
        block_size=DEFAULT_BLOCK_SIZE if block_size is None else block_size,
        output_mask=int(OutputFormat.HEADER) if output_mask is None else output_mask,
        output_dir=_expand_path(raw.get("output_dir"), base) or base,
        channel_dump_format=str(raw.get("channel_dump_format", "bin")).lower(),
        log_level=str(raw.get("log_level", "INFO")),
        log_file=_expand_path(raw.get("log_file"), base),
    )
    return finalize_config(config)
