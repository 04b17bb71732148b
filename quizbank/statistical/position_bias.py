"""Position-bias analysis over the correct-answer index of a question pool."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Sequence, Tuple

import math
import numpy as np

from quizbank.data.schemas import Question

# -----------------------------------------------------------------------------

@dataclass
class PositionBiasReport:
    """Report structure for position bias analysis."""
    method: str
    timestamp: str
    dataset_info: Dict[str, Any]
    index_frequencies: Dict[str, int]
    chi_square_results: Dict[str, Any]
    over_represented: Dict[str, List[int]]
    summary_statistics: Dict[str, Any]

    @property
    def bias_detected(self) -> bool:
        return bool(self.summary_statistics.get("bias_detected", False))

# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------

def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _regularized_gamma_p(s: float, x: float) -> float:
    """
    Regularized lower incomplete gamma P(s,x) using series/continued fraction (NR style).
    Accurate enough for chi-square CDF without SciPy.
    """
    if x < 0 or s <= 0:
        return float("nan")
    if x == 0:
        return 0.0

    if x < s + 1:
        # series
        term = 1.0 / s
        summ = term
        k = 1
        while True:
            term *= x / (s + k)
            summ += term
            if abs(term) < abs(summ) * 1e-12 or k > 10_000:
                break
            k += 1
        return summ * math.exp(-x + s * math.log(x) - math.lgamma(s))

    # continued fraction for Q (Lentz), return P = 1 - Q
    b = x + 1.0 - s
    c = 1.0 / 1e-30
    d = 1.0 / b
    f = d
    for i in range(1, 10_000):
        an = -i * (i - s)
        b += 2.0
        d = an * d + b
        if abs(d) < 1e-30:
            d = 1e-30
        c = b + an / c
        if abs(c) < 1e-30:
            c = 1e-30
        d = 1.0 / d
        delta = d * c
        f *= delta
        if abs(delta - 1.0) < 1e-12:
            break
    return 1.0 - f * math.exp(-x + s * math.log(x) - math.lgamma(s))


def _chi2_sf(x: float, df: int) -> float:
    """Survival function (1 - CDF) for chi-square(df) using regularized gamma."""
    if df <= 0:
        return 1.0
    s = df / 2.0
    return max(0.0, min(1.0, 1.0 - _regularized_gamma_p(s, x / 2.0)))


def _group_by_choice_count(questions: Sequence[Question]) -> Dict[int, List[Question]]:
    groups: Dict[int, List[Question]] = {}
    for q in questions:
        groups.setdefault(len(q.choices), []).append(q)
    return groups


def _counts_for_group(k: int, qs: Sequence[Question]) -> np.ndarray:
    counts = np.zeros(k, dtype=float)
    for q in qs:
        if q.correct_index is not None and 0 <= q.correct_index < k:
            counts[q.correct_index] += 1
    return counts

# -----------------------------------------------------------------------------
# Public functions
# -----------------------------------------------------------------------------

def calculate_index_distribution(questions: Sequence[Question]) -> Dict[int, int]:
    """Count how often each 0-based index holds the correct answer.

    Unresolved questions are not counted.
    """
    counts: Dict[int, int] = {}
    for q in questions:
        if q.correct_index is None:
            continue
        counts[q.correct_index] = counts.get(q.correct_index, 0) + 1
    return dict(sorted(counts.items()))


def chi_square_test_from_scratch(observed: np.ndarray, expected: np.ndarray) -> Tuple[float, float, int]:
    """Classic Pearson chi-square and p-value (no SciPy)."""
    observed = np.asarray(observed, dtype=float)
    expected = np.asarray(expected, dtype=float)
    if observed.shape != expected.shape:
        raise ValueError("Observed and expected must have same shape.")
    if np.any(expected <= 0):
        raise ValueError("Expected frequencies must be positive.")

    chi2 = float(np.sum((observed - expected) ** 2 / expected))
    df = observed.size - 1
    p = _chi2_sf(chi2, df)
    return chi2, p, df


def grouped_chi_square(questions: Sequence[Question]) -> Tuple[float, float, int, np.ndarray, np.ndarray]:
    """
    Chi-square summed over each choice-count group against a uniform index.
    Returns: (chi2, p, df, observed_concat, expected_concat)
    """
    chi2_total = 0.0
    df_total = 0
    observed_all: List[float] = []
    expected_all: List[float] = []

    for k, qs in sorted(_group_by_choice_count(questions).items()):
        counts = _counts_for_group(k, qs)
        n = counts.sum()
        if n < 1:
            continue
        exp = np.full(k, n / k)
        chi2_k, _, df_k = chi_square_test_from_scratch(counts, exp)
        chi2_total += chi2_k
        df_total += df_k
        observed_all.extend(counts.tolist())
        expected_all.extend(exp.tolist())

    p_total = _chi2_sf(chi2_total, df_total) if df_total > 0 else 1.0
    return chi2_total, p_total, df_total, np.array(observed_all), np.array(expected_all)


def find_over_represented(questions: Sequence[Question], threshold: float = 0.05) -> Dict[str, List[int]]:
    """
    Heuristic: within each choice-count group with at least 10 resolved
    questions, return the indices whose standardized residual is large.
    """
    z_cut = 1.96 if threshold >= 0.05 else 2.58  # rough
    hot: Dict[str, List[int]] = {}

    for k, qs in sorted(_group_by_choice_count(questions).items()):
        counts = _counts_for_group(k, qs)
        n = counts.sum()
        if n < 10:
            continue
        exp = np.full(k, n / k)
        resid = (counts - exp) / np.sqrt(exp)
        positions = [i for i, z in enumerate(resid) if z >= z_cut]
        if positions:
            hot[str(k)] = positions
    return hot


def analyze_position_bias(
    questions: Sequence[Question],
    significance_level: float = 0.05,
) -> PositionBiasReport:
    """Distribution, grouped chi-square and effect size for one pool."""
    resolved = [q for q in questions if q.correct_index is not None]
    chi2, p, df, obs, exp = grouped_chi_square(resolved)

    n = obs.sum()
    groups = _group_by_choice_count(resolved)
    k_min = min(groups) if groups else 0
    # Cramer's V
    effect_size = math.sqrt(chi2 / (n * (k_min - 1))) if n > 0 and k_min > 1 else 0.0
    significant = bool(df > 0 and p < significance_level)

    return PositionBiasReport(
        method="position_bias_analysis",
        timestamp=_now_iso(),
        dataset_info={
            "total_questions": len(questions),
            "resolved_questions": len(resolved),
            "choice_counts": {str(k): len(v) for k, v in sorted(_group_by_choice_count(questions).items())},
        },
        index_frequencies={str(i): c for i, c in calculate_index_distribution(resolved).items()},
        chi_square_results={
            "chi_square_statistic": chi2,
            "p_value": p,
            "degrees_of_freedom": df,
            "observed_frequencies": obs.tolist(),
            "expected_frequencies": exp.tolist(),
            "significant": significant,
        },
        over_represented=find_over_represented(resolved, threshold=significance_level),
        summary_statistics={
            "bias_detected": significant,
            "effect_size": effect_size,
            "significance_level": significance_level,
        },
    )
