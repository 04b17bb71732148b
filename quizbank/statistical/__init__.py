"""Statistical analysis modules for quizbank."""

from .position_bias import (
    PositionBiasReport,
    analyze_position_bias,
    calculate_index_distribution,
    chi_square_test_from_scratch,
    find_over_represented,
    grouped_chi_square,
)

__all__ = [
    "PositionBiasReport",
    "calculate_index_distribution",
    "chi_square_test_from_scratch",
    "grouped_chi_square",
    "find_over_represented",
    "analyze_position_bias",
]
