"""Answer validation facade over the registered answer strategies."""

from __future__ import annotations

from typing import Any

from ..quiz.models import Question, QuestionType
from . import strategies  # noqa: F401  (registers the built-in strategies)
from .base import AnswerStrategy, StrategyRegistry


class AnswerValidator:
    """
    Validates submitted answers by dispatching on ``question.type``.

    Every QuestionType must have a registered strategy; construction fails
    otherwise so a missing kind is caught before any quiz is scored.
    """

    def __init__(self) -> None:
        missing = StrategyRegistry.unregistered()
        if missing:
            raise KeyError(
                f"No strategy registered for question types: {', '.join(m.value for m in missing)}"
            )
        self._strategies: dict[QuestionType, AnswerStrategy] = {
            kind: StrategyRegistry.get(kind)() for kind in QuestionType
        }

    def strategy_for(self, question: Question) -> AnswerStrategy:
        return self._strategies[question.question_type]

    def validate(self, question: Question, answer: Any) -> bool:
        return self.strategy_for(question).matches(question, answer)

    def correct_answer(self, question: Question) -> Any:
        """Canonical answer projection for feedback and review (not used for scoring)."""
        return self.strategy_for(question).correct_answer(question)

    def feedback(self, question: Question, is_correct: bool) -> str:
        return self.strategy_for(question).feedback(is_correct)
