"""
Base Answer Strategy.

Provides the abstract base for per-question-type answer strategies and
a registry for strategy discovery and instantiation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from loguru import logger

from ..quiz.models import Question, QuestionType

CORRECT_FEEDBACK = "Correct! Well done."


# =============================================================================
# Strategy Registry
# =============================================================================


class StrategyRegistry:
    """
    Registry of answer strategies keyed by question type.

    Example:
        # Register a strategy
        @StrategyRegistry.register(QuestionType.TRUE_FALSE)
        class TrueFalseStrategy(AnswerStrategy):
            ...

        # Get a strategy
        strategy = StrategyRegistry.for_question(question)
    """

    _strategies: ClassVar[dict[QuestionType, type[AnswerStrategy]]] = {}

    @classmethod
    def register(cls, question_type: QuestionType):
        """
        Decorator to register an answer strategy.

        Args:
            question_type: QuestionType this strategy handles
        """

        def decorator(strategy_class: type[AnswerStrategy]):
            cls._strategies[question_type] = strategy_class
            strategy_class.question_type = question_type
            logger.debug(f"Registered strategy: {question_type.value} -> {strategy_class.__name__}")
            return strategy_class

        return decorator

    @classmethod
    def get(cls, question_type: QuestionType) -> type[AnswerStrategy]:
        """Get strategy class by question type."""
        if question_type not in cls._strategies:
            raise KeyError(f"No strategy registered for question type: {question_type.value}")
        return cls._strategies[question_type]

    @classmethod
    def for_question(cls, question: Question) -> AnswerStrategy:
        return cls.get(question.question_type)()

    @classmethod
    def list_strategies(cls) -> dict[str, type[AnswerStrategy]]:
        """List all registered strategies."""
        return {kind.value: cls._strategies[kind] for kind in cls._strategies}

    @classmethod
    def unregistered(cls) -> list[QuestionType]:
        """Question types with no registered strategy."""
        return [kind for kind in QuestionType if kind not in cls._strategies]


# =============================================================================
# Base Answer Strategy
# =============================================================================


class AnswerStrategy(ABC):
    """
    Abstract base class for answer strategies.

    Each strategy knows how to:
    1. Decide whether a submitted answer matches the canonical answer
    2. Project the canonical answer for review screens
    3. Produce the fixed feedback string for its question type

    Submissions of the wrong shape are simply incorrect; strategies never raise
    on learner input.
    """

    question_type: ClassVar[QuestionType]
    name: ClassVar[str] = "base_strategy"
    incorrect_feedback: ClassVar[str] = "Incorrect answer."

    @abstractmethod
    def matches(self, question: Question, answer: Any) -> bool:
        """
        Check a submitted answer.

        Args:
            question: The question being answered
            answer: The learner's answer (shape depends on question type)

        Returns:
            True if the answer is correct
        """
        ...

    @abstractmethod
    def correct_answer(self, question: Question) -> Any:
        """Canonical answer in the shape ``matches`` accepts."""
        ...

    def feedback(self, is_correct: bool) -> str:
        return CORRECT_FEEDBACK if is_correct else self.incorrect_feedback

    def _normalize(self, text: str, case_sensitive: bool = False) -> str:
        """Normalize text for comparison."""
        text = text.strip()
        return text if case_sensitive else text.lower()
