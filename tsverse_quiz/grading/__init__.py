"""
Answer Grading.

Strategy Pattern implementation for answer validation, one strategy per
question type, plus the quiz scorer that aggregates per-question results.
"""

from .base import AnswerStrategy, StrategyRegistry
from .strategies import (
    CodeCompletionStrategy,
    FillInBlankStrategy,
    MatchingStrategy,
    MultipleChoiceStrategy,
    OrderingStrategy,
    ShortAnswerStrategy,
    TrueFalseStrategy,
)
from .validator import AnswerValidator
from .scorer import (
    GRADE_THRESHOLDS,
    QuestionResult,
    QuizAnalytics,
    QuizResult,
    QuizScorer,
    calculate_grade,
)

__all__ = [
    # Base classes
    "AnswerStrategy",
    "StrategyRegistry",
    # Strategies
    "MultipleChoiceStrategy",
    "TrueFalseStrategy",
    "ShortAnswerStrategy",
    "FillInBlankStrategy",
    "MatchingStrategy",
    "OrderingStrategy",
    "CodeCompletionStrategy",
    # Validation & scoring
    "AnswerValidator",
    "QuizScorer",
    "QuestionResult",
    "QuizResult",
    "QuizAnalytics",
    "GRADE_THRESHOLDS",
    "calculate_grade",
]
