"""Analysis modules for quizbank."""

from .answer_audit import (
    AuditReport,
    audit_pool,
    audit_summary_frame,
    format_audit_report,
    write_summary_csv,
)

__all__ = [
    "AuditReport",
    "audit_pool",
    "format_audit_report",
    "audit_summary_frame",
    "write_summary_csv",
]
