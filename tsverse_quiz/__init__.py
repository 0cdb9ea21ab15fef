"""
tsverse-quiz: quiz generation and scoring engine for the TypeScript
learning platform.
"""

from .config import Settings, configure_logging, get_settings
from .grading import AnswerValidator, QuizResult, QuizScorer
from .quiz import (
    QuestionBank,
    QuestionType,
    DifficultyLevel,
    Quiz,
    QuizCriteria,
    QuizGenerator,
    QuizTemplateRegistry,
    UserAnswer,
)

__version__ = "1.0.0"

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "QuestionBank",
    "QuestionType",
    "DifficultyLevel",
    "Quiz",
    "QuizCriteria",
    "QuizGenerator",
    "QuizTemplateRegistry",
    "UserAnswer",
    "AnswerValidator",
    "QuizScorer",
    "QuizResult",
]
