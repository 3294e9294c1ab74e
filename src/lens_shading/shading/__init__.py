from .grid import (
    CHANNEL_NAMES,
    CHANNEL_ORDERING,
    GAIN_MAX,
    GAIN_UNITY,
    GainTable,
    analysis_window,
    block_sums,
    build_gain_table,
    compute_gain_grid,
    gains_from_block_sums,
)

__all__ = [
    "CHANNEL_NAMES",
    "CHANNEL_ORDERING",
    "GAIN_MAX",
    "GAIN_UNITY",
    "GainTable",
    "analysis_window",
    "block_sums",
    "build_gain_table",
    "compute_gain_grid",
    "gains_from_block_sums",
]
