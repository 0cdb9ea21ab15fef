"""
Answer Strategy Implementations.

Concrete answer strategies, one per QuestionType.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..quiz.models import (
    CodeCompletionQuestion,
    FillInBlankQuestion,
    MatchingQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    QuestionType,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)
from .base import AnswerStrategy, StrategyRegistry

_SEQUENCE_TYPES = (list, tuple)


def _is_index(value: Any) -> bool:
    # bool is an int subclass; True must not pass for option 1
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# MULTIPLE_CHOICE Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.MULTIPLE_CHOICE)
class MultipleChoiceStrategy(AnswerStrategy):
    """
    Single answers compare option indices; multi-select answers compare
    index sets, ignoring order.
    """

    name = "multiple_choice"
    incorrect_feedback = "Incorrect. Please review the correct answer."

    def matches(self, question: MultipleChoiceQuestion, answer: Any) -> bool:
        if question.allow_multiple:
            if not isinstance(answer, (list, tuple, set, frozenset)):
                return False
            if not all(_is_index(item) for item in answer):
                return False
            return set(answer) == set(question.correct_answers)

        return _is_index(answer) and answer == question.correct_answer

    def correct_answer(self, question: MultipleChoiceQuestion) -> int | list[int]:
        if question.allow_multiple:
            return list(question.correct_answers)
        return question.correct_answer


# =============================================================================
# TRUE_FALSE Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.TRUE_FALSE)
class TrueFalseStrategy(AnswerStrategy):
    name = "true_false"
    incorrect_feedback = "Incorrect. The correct answer is the opposite."

    def matches(self, question: TrueFalseQuestion, answer: Any) -> bool:
        return isinstance(answer, bool) and answer == question.correct_answer

    def correct_answer(self, question: TrueFalseQuestion) -> bool:
        return question.correct_answer


# =============================================================================
# SHORT_ANSWER Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.SHORT_ANSWER)
class ShortAnswerStrategy(AnswerStrategy):
    """
    Grade free text against accepted answers.

    Supports:
    - Case sensitivity toggle
    - Exact matching, or containment in either direction
    """

    name = "short_answer"
    incorrect_feedback = "Incorrect. Please check your spelling and try again."

    def matches(self, question: ShortAnswerQuestion, answer: Any) -> bool:
        if not isinstance(answer, str):
            return False

        submitted = self._normalize(answer, question.case_sensitive)
        # An empty string is contained in every accepted answer
        if not submitted:
            return False

        for accepted in question.accepted_answers:
            expected = self._normalize(accepted, question.case_sensitive)
            if question.exact_match:
                if submitted == expected:
                    return True
            elif submitted in expected or expected in submitted:
                return True

        return False

    def correct_answer(self, question: ShortAnswerQuestion) -> str:
        return question.accepted_answers[0]


# =============================================================================
# FILL_IN_BLANK Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.FILL_IN_BLANK)
class FillInBlankStrategy(AnswerStrategy):
    """
    Every blank must equal one of its accepted answers.

    Answers are either a list in blank-position order or a mapping of
    position to text.
    """

    name = "fill_in_blank"
    incorrect_feedback = "Incorrect. Check each blank and try again."

    def matches(self, question: FillInBlankQuestion, answer: Any) -> bool:
        submitted = self._by_position(question, answer)
        if submitted is None:
            return False

        for blank in question.blanks:
            value = submitted.get(blank.position)
            if not isinstance(value, str):
                return False
            normalized = self._normalize(value, blank.case_sensitive)
            accepted = {self._normalize(c, blank.case_sensitive) for c in blank.correct_answers}
            if normalized not in accepted:
                return False

        return True

    def correct_answer(self, question: FillInBlankQuestion) -> list[str]:
        return [blank.correct_answers[0] for blank in question.blanks]

    def _by_position(self, question: FillInBlankQuestion, answer: Any) -> dict[int, Any] | None:
        if isinstance(answer, Mapping):
            try:
                # JSON object keys arrive as strings
                return {int(key): value for key, value in answer.items()}
            except (TypeError, ValueError):
                return None

        if isinstance(answer, _SEQUENCE_TYPES):
            if len(answer) != len(question.blanks):
                return None
            return {blank.position: value for blank, value in zip(question.blanks, answer)}

        return None


# =============================================================================
# MATCHING Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.MATCHING)
class MatchingStrategy(AnswerStrategy):
    """
    The submitted left-to-right mapping must equal the correct one.

    Accepts a mapping ``{left_id: right_id}`` or a list of pairs, where a
    pair is a 2-item sequence or an object with leftId/rightId keys.
    """

    name = "matching"
    incorrect_feedback = "Incorrect. Some items are not matched correctly."

    def matches(self, question: MatchingQuestion, answer: Any) -> bool:
        submitted = self._as_mapping(answer)
        return submitted is not None and submitted == question.correct_mapping

    def correct_answer(self, question: MatchingQuestion) -> dict[str, str]:
        return question.correct_mapping

    def _as_mapping(self, answer: Any) -> dict[Any, Any] | None:
        if isinstance(answer, Mapping):
            return dict(answer)

        if not isinstance(answer, _SEQUENCE_TYPES):
            return None

        mapping: dict[Any, Any] = {}
        for pair in answer:
            if isinstance(pair, Mapping):
                left = pair.get("leftId", pair.get("left_id"))
                right = pair.get("rightId", pair.get("right_id"))
            elif isinstance(pair, _SEQUENCE_TYPES) and len(pair) == 2:
                left, right = pair
            else:
                return None
            if not isinstance(left, str) or left in mapping:
                return None
            mapping[left] = right
        return mapping


# =============================================================================
# ORDERING Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.ORDERING)
class OrderingStrategy(AnswerStrategy):
    name = "ordering"
    incorrect_feedback = "Incorrect. Review the order of the items."

    def matches(self, question: OrderingQuestion, answer: Any) -> bool:
        return isinstance(answer, _SEQUENCE_TYPES) and tuple(answer) == question.correct_order

    def correct_answer(self, question: OrderingQuestion) -> list[str]:
        return list(question.correct_order)


# =============================================================================
# CODE_COMPLETION Strategy
# =============================================================================


@StrategyRegistry.register(QuestionType.CODE_COMPLETION)
class CodeCompletionStrategy(AnswerStrategy):
    """
    Compare submitted code with the expected solution, ignoring differences
    in whitespace. The code itself is never executed.
    """

    name = "code_completion"
    incorrect_feedback = "Incorrect. Compare your code with the expected solution."

    def matches(self, question: CodeCompletionQuestion, answer: Any) -> bool:
        if not isinstance(answer, str):
            return False
        return self._collapse(answer) == self._collapse(question.expected_solution)

    def correct_answer(self, question: CodeCompletionQuestion) -> str:
        return question.expected_solution

    def _collapse(self, code: str) -> str:
        return " ".join(code.split())
