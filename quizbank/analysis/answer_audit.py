"""
Correct-answer audit for question banks.

For each pool this reports how the correct answer is distributed over choice
positions, how many questions have no resolvable answer, and a few examples
needing attention. A pool whose answers sit overwhelmingly at one index
usually points at the authoring process rather than the quiz UI, so such
skew is flagged explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..config import AuditConfig
from ..data.schemas import QuestionPool
from ..statistical.position_bias import (
    PositionBiasReport,
    analyze_position_bias,
    calculate_index_distribution,
)

logger = logging.getLogger(__name__)

PINNED_TO_FIRST = "pinned_to_first"
DOMINANT_INDEX = "dominant_index"
POSITION_BIAS = "position_bias"

_WARNING_TEXT = {
    PINNED_TO_FIRST: (
        "All correct answers appear at index 0. That suggests the dataset "
        "(not the UI) pins answers to the first choice."
    ),
    DOMINANT_INDEX: "One index holds {share:.0%} of the correct answers (index {index}).",
    POSITION_BIAS: "Correct-index distribution is significantly non-uniform (p={p:.3g}).",
}


@dataclass
class AuditExample:
    number: int  # 1-based position in the pool
    id: str
    question_text: str
    choices: List[str]
    correct_index: Optional[int]


@dataclass
class AuditReport:
    source: str
    total: int
    distribution: Dict[int, int]
    max_choices: int
    missing: int
    out_of_range: int
    examples: List[AuditExample] = field(default_factory=list)
    position_bias: Optional[PositionBiasReport] = None
    warnings: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def resolved(self) -> int:
        return sum(self.distribution.values())

    @property
    def has_problems(self) -> bool:
        return bool(self.missing or self.out_of_range or self.warnings)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["distribution"] = {str(k): v for k, v in self.distribution.items()}
        return out


def audit_pool(pool: QuestionPool, config: Optional[AuditConfig] = None) -> AuditReport:
    """Audit the correct-answer signal of every question in ``pool``."""
    cfg = config or AuditConfig()
    missing = 0
    out_of_range = 0
    examples: List[AuditExample] = []

    for number, q in enumerate(pool, start=1):
        ci = q.correct_index
        if ci is not None and 0 <= ci < len(q.choices):
            continue
        if ci is None:
            missing += 1
        else:
            out_of_range += 1
        if len(examples) < cfg.max_examples:
            examples.append(AuditExample(number, q.id, q.question_text, list(q.choices), ci))

    valid = [q for q in pool if q.correct_index is not None and q.correct_index < len(q.choices)]
    distribution = calculate_index_distribution(valid)
    bias = analyze_position_bias(valid, significance_level=cfg.significance)

    report = AuditReport(
        source=pool.name,
        total=len(pool),
        distribution=distribution,
        max_choices=max((len(q.choices) for q in pool), default=0),
        missing=missing,
        out_of_range=out_of_range,
        examples=examples,
        position_bias=bias,
    )
    _add_warnings(report, cfg)
    logger.info(
        "Audited %s: %d questions, %d missing, warnings=%s",
        report.source, report.total, report.missing, report.warnings or "none",
        extra={"dataset": report.source, "questions": report.total, "unresolved": report.missing},
    )
    return report


def _add_warnings(report: AuditReport, cfg: AuditConfig) -> None:
    resolved = report.resolved
    if resolved == 0:
        return

    if set(report.distribution) == {0} and report.missing == 0:
        report.warnings.append(PINNED_TO_FIRST)
    elif resolved >= cfg.min_questions:
        index, count = max(report.distribution.items(), key=lambda kv: kv[1])
        share = count / resolved
        if share >= cfg.skew_threshold:
            report.warnings.append(DOMINANT_INDEX)
            report.details[DOMINANT_INDEX] = {"index": index, "share": share}

    if resolved < cfg.min_questions:
        return
    if report.position_bias is not None and report.position_bias.bias_detected:
        report.warnings.append(POSITION_BIAS)
        report.details[POSITION_BIAS] = {
            "p": report.position_bias.chi_square_results["p_value"],
        }


def format_audit_report(report: AuditReport) -> str:
    """Render the human-readable block printed by ``quizbank audit``."""
    lines = [f"=== {report.source} ===", f"Total detected questions: {report.total}"]
    if report.total == 0:
        return "\n".join(lines)

    parts = []
    for i in range(report.max_choices):
        n = report.distribution.get(i, 0)
        parts.append(f"{i}: {n} ({n / report.total * 100:.1f}%)")
    lines.append(f"Correct-index distribution -> {'  |  '.join(parts)}")
    lines.append(f"Missing correct key: {report.missing}")
    lines.append(f"Out-of-range index: {report.out_of_range}")

    if report.examples:
        lines.append("")
        lines.append(f"Examples needing attention (first {len(report.examples)}):")
        for ex in report.examples:
            ci = "unresolved" if ex.correct_index is None else ex.correct_index
            lines.append(
                f'- #{ex.number}: ci={ci}  Q="{ex.question_text}"  Choices=[{" | ".join(ex.choices)}]'
            )

    for code in report.warnings:
        lines.append("WARNING: " + _WARNING_TEXT[code].format(**report.details.get(code, {})))
    return "\n".join(lines)


def audit_summary_frame(reports: Sequence[AuditReport]) -> pd.DataFrame:
    """One row per audited pool, with per-index shares as extra columns."""
    if not reports:
        return pd.DataFrame()
    rows = []
    width = max(r.max_choices for r in reports)
    for r in reports:
        row: Dict[str, Any] = {
            "source": r.source,
            "total": r.total,
            "resolved": r.resolved,
            "missing": r.missing,
            "out_of_range": r.out_of_range,
            "p_value": r.position_bias.chi_square_results["p_value"] if r.position_bias else None,
            "warnings": ",".join(r.warnings),
        }
        for i in range(width):
            row[f"index_{i}"] = r.distribution.get(i, 0)
        rows.append(row)
    df = pd.DataFrame(rows)
    index_cols = [f"index_{i}" for i in range(width)]
    shares = df[index_cols].div(df["resolved"].where(df["resolved"] > 0), axis=0)
    for i in range(width):
        df[f"share_{i}"] = shares[f"index_{i}"].fillna(0.0).round(3)
    return df


def write_summary_csv(out_path: str | Path, reports: Sequence[AuditReport]) -> None:
    p = Path(out_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    audit_summary_frame(reports).to_csv(p, index=False)
