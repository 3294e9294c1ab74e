from __future__ import annotations

from pathlib import Path

import pytest

from lens_shading.config import (
    OutputFormat,
    load_config,
    normalize_block_size,
    validate_output_mask,
)
from lens_shading.decode import InvalidParameterError


@pytest.mark.parametrize(("requested", "effective"), [(1, 2), (2, 2), (4, 4), (5, 6), (31, 32), (32, 32)])
def test_block_size_rounds_odd_values_up(requested: int, effective: int) -> None:
    assert normalize_block_size(requested) == effective


@pytest.mark.parametrize("requested", [0, -2, 33, 64])
def test_block_size_out_of_range(requested: int) -> None:
    with pytest.raises(InvalidParameterError):
        normalize_block_size(requested)


def test_output_mask_needs_a_known_bit() -> None:
    assert validate_output_mask(3) == 3
    assert validate_output_mask(8) == 8
    assert validate_output_mask(17) == 17
    for bad in (0, 16, 32, -1):
        with pytest.raises(InvalidParameterError):
            validate_output_mask(bad)


def test_load_config_resolves_relative_paths(tmp_path: Path) -> None:
    cfg_file = tmp_path / "lens.yaml"
    cfg_file.write_text(
        """
input: ./captures/wall.jpg
output_dir: ./out
black_level: 0
block_size: 7
output_mask: 6
channel_dump_format: TIFF
log_level: debug
""",
        encoding="utf-8",
    )

    cfg = load_config(cfg_file)
    assert cfg.input_path == (tmp_path / "captures" / "wall.jpg").resolve()
    assert cfg.output_dir == (tmp_path / "out").resolve()
    assert cfg.black_level == 0
    assert cfg.block_size == 8
    assert cfg.outputs == OutputFormat.BINARY | OutputFormat.TEXT
    assert cfg.channel_dump_format == "tiff"
    assert cfg.log_level == "debug"


def test_load_config_defaults(tmp_path: Path) -> None:
    cfg_file = tmp_path / "empty.yaml"
    cfg_file.write_text("", encoding="utf-8")

    cfg = load_config(cfg_file)
    assert cfg.input_path is None
    assert cfg.black_level is None
    assert cfg.block_size == 4
    assert cfg.outputs == OutputFormat.HEADER
    assert cfg.output_dir == tmp_path.resolve()


def test_load_config_rejects_bad_block_size(tmp_path: Path) -> None:
    cfg_file = tmp_path / "bad.yaml"
    cfg_file.write_text("block_size: 40\n", encoding="utf-8")
    with pytest.raises(InvalidParameterError):
        load_config(cfg_file)
