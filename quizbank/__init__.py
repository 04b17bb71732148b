"""quizbank package.

Normalizes loosely structured multiple-choice question banks (several
historical JSON schema variants, bilingual en/ja fields) into question pools
with a strictly resolved correct answer, and audits where correct answers sit.
"""

from .analysis import audit_pool
from .config import AppConfig, default_app_config
from .data import Question, QuestionPool, collect_questions, load_pool, normalize_record
from .security import make_question_id
from .statistical import analyze_position_bias
from .utils import set_determinism, setup_logging

__all__ = [
    "__version__",
    "AppConfig",
    "default_app_config",
    "Question",
    "QuestionPool",
    "collect_questions",
    "normalize_record",
    "load_pool",
    "audit_pool",
    "analyze_position_bias",
    "make_question_id",
    "setup_logging",
    "set_determinism",
]

__version__ = "0.1.0"
