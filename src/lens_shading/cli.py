from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from lens_shading.config import AnalyseConfig, finalize_config, load_config
from lens_shading.decode import InvalidParameterError
from lens_shading.utils.logging_utils import configure_logging


logger = logging.getLogger(__name__)

_OUTPUT_HELP = (
    "Output format bitmask, formats combine (3 = 1 + 2): "
    "1 header file (default), 2 binary file, 4 text file, 8 channel data"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lens-shading-analyse",
        description="Analyse lens shading from a raw capture of a uniformly lit scene.",
    )
    parser.add_argument("-i", "--input", default=None, help="Raw image file (mandatory)")
    parser.add_argument("-b", "--black-level", type=int, default=None, help="Black level override")
    parser.add_argument(
        "-s",
        "--block-size",
        type=int,
        default=None,
        help="Size of the analysis cell. Minimum 2, maximum 32, default 4",
    )
    parser.add_argument("-o", "--output", type=int, default=None, help=_OUTPUT_HELP)
    parser.add_argument("-d", "--out-dir", default=None, help="Directory for output files (default: cwd)")
    parser.add_argument("-c", "--config", default=None, help="Optional YAML config")
    parser.add_argument("--channel-format", choices=("bin", "tiff"), default=None, help="Channel dump format")
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON summary")
    return parser


def _resolve_config(args: argparse.Namespace) -> AnalyseConfig:
    config = load_config(args.config) if args.config else AnalyseConfig()

    if args.input is not None:
        config.input_path = Path(args.input).expanduser().resolve()
    if args.black_level is not None:
        config.black_level = args.black_level
    if args.block_size is not None:
        config.block_size = args.block_size
    if args.output is not None:
        config.output_mask = args.output
    if args.out_dir is not None:
        config.output_dir = Path(args.out_dir).expanduser().resolve()
    if args.channel_format is not None:
        config.channel_dump_format = args.channel_format
    if args.log_level is not None:
        config.log_level = args.log_level

    if config.input_path is None:
        raise InvalidParameterError("an input raw file is required (-i)")
    return finalize_config(config)


def main(argv: list[str] | None = None) -> int:
    from lens_shading.analyse import run_analysis

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = _resolve_config(args)
    except InvalidParameterError as exc:
        parser.print_usage(sys.stderr)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except Exception as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.log_level, config.log_file)

    try:
        analysis, written = run_analysis(config)
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        payload = analysis.summary()
        payload["input"] = str(config.input_path)
        payload["outputs"] = [str(p) for p in written]
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Grid size: {analysis.table.grid_width} x {analysis.table.grid_height}")
    for path in written:
        print(f"  {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
