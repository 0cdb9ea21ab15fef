"""
Quiz Generator.

Filters the question bank by criteria, selects a subset either by count
(random shuffle-then-take) or by point budget (greedy, ascending points),
and derives the quiz metadata: total points, overall difficulty and
estimated completion time.
"""
from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeVar
from uuid import uuid4

from loguru import logger

from ..config import get_settings
from .exceptions import InsufficientQuestionsError
from .models import (
    DifficultyLevel,
    MatchingQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    QuestionType,
    Quiz,
    QuizCriteria,
)
from .question_bank import QuestionBank, make_rng
from .quiz_templates import QuizTemplateRegistry

# =============================================================================
# Derivation Tables
# =============================================================================

DIFFICULTY_SCORES: dict[DifficultyLevel, int] = {
    DifficultyLevel.BEGINNER: 1,
    DifficultyLevel.INTERMEDIATE: 2,
    DifficultyLevel.ADVANCED: 3,
    DifficultyLevel.EXPERT: 4,
}

# Average difficulty score bucket ceilings
BEGINNER_MAX_SCORE = 1.3
INTERMEDIATE_MAX_SCORE = 2.3

# Minutes per question before the difficulty multiplier
BASE_TIME_PER_TYPE: dict[QuestionType, float] = {
    QuestionType.MULTIPLE_CHOICE: 1.5,
    QuestionType.TRUE_FALSE: 1.0,
    QuestionType.SHORT_ANSWER: 2.0,
    QuestionType.FILL_IN_BLANK: 2.0,
    QuestionType.MATCHING: 3.0,
    QuestionType.ORDERING: 2.5,
    QuestionType.CODE_COMPLETION: 5.0,
}

DIFFICULTY_TIME_MULTIPLIER: dict[DifficultyLevel, float] = {
    DifficultyLevel.BEGINNER: 1.0,
    DifficultyLevel.INTERMEDIATE: 1.2,
    DifficultyLevel.ADVANCED: 1.5,
    DifficultyLevel.EXPERT: 1.8,
}

DEFAULT_QUIZ_TITLE = "TypeScript Quiz"

T = TypeVar("T")


# =============================================================================
# Derivations
# =============================================================================


def calculate_overall_difficulty(questions: Sequence[Question]) -> DifficultyLevel:
    """
    Bucket the average difficulty score of ``questions``.

    The result is always beginner, intermediate or advanced; expert
    questions raise the average but have no bucket of their own.
    """
    if not questions:
        raise ValueError("Cannot derive difficulty of an empty question list")

    average = sum(DIFFICULTY_SCORES[q.difficulty] for q in questions) / len(questions)
    if average <= BEGINNER_MAX_SCORE:
        return DifficultyLevel.BEGINNER
    if average <= INTERMEDIATE_MAX_SCORE:
        return DifficultyLevel.INTERMEDIATE
    return DifficultyLevel.ADVANCED


def calculate_estimated_time(questions: Sequence[Question]) -> int:
    """Estimated completion time in whole minutes (rounded up)."""
    total = sum(
        BASE_TIME_PER_TYPE[q.question_type] * DIFFICULTY_TIME_MULTIPLIER[q.difficulty]
        for q in questions
    )
    return math.ceil(total)


def build_quiz_title(criteria: QuizCriteria) -> str:
    """Derive a display title from the criteria's categories, difficulty and time limit."""
    title = DEFAULT_QUIZ_TITLE

    if criteria.categories:
        title = f"{' & '.join(criteria.categories)} Quiz"

    if criteria.difficulties and len(criteria.difficulties) == 1:
        title += f" ({criteria.difficulties[0].value.capitalize()})"

    if criteria.time_limit:
        title += f" - {criteria.time_limit} min"

    return title


# =============================================================================
# Selection
# =============================================================================


def greedy_point_selection(
    candidates: Sequence[Question],
    target_points: int,
    max_questions: int,
) -> list[Question]:
    """
    Greedy pass of point-budget selection.

    Walks candidates in ascending point order, taking each one that still
    fits under ``target_points``, until ``max_questions`` are taken or the
    target is hit exactly. The picked points never exceed the target.
    This approximates the target; it is not a subset-sum solver.
    """
    selected: list[Question] = []
    current_points = 0

    for question in sorted(candidates, key=lambda q: q.points):
        if len(selected) >= max_questions:
            break

        if current_points + question.points <= target_points:
            selected.append(question)
            current_points += question.points

        if current_points == target_points:
            break

    return selected


def select_by_points(
    candidates: Sequence[Question],
    target_points: int,
    max_questions: int,
) -> list[Question]:
    """Greedy point selection, then fill remaining slots in ascending point order."""
    selected = greedy_point_selection(candidates, target_points, max_questions)

    chosen_ids = {q.id for q in selected}
    for question in sorted(candidates, key=lambda q: q.points):
        if len(selected) >= max_questions:
            break
        if question.id not in chosen_ids:
            selected.append(question)
            chosen_ids.add(question.id)

    return selected


# =============================================================================
# Validation
# =============================================================================


@dataclass
class QuizValidation:
    """Structural self-consistency report for a quiz."""
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_quiz(quiz: Quiz) -> QuizValidation:
    errors: list[str] = []

    if not quiz.title or not quiz.title.strip():
        errors.append("Quiz must have a title")

    if not quiz.questions:
        errors.append("Quiz must have at least one question")

    if quiz.total_points <= 0:
        errors.append("Quiz must have positive total points")

    if quiz.estimated_time <= 0:
        errors.append("Quiz must have positive estimated time")

    calculated_points = sum(q.points for q in quiz.questions)
    if calculated_points != quiz.total_points:
        errors.append(
            f"Total points mismatch: calculated {calculated_points}, stored {quiz.total_points}"
        )

    return QuizValidation(is_valid=not errors, errors=errors)


# =============================================================================
# Generator
# =============================================================================


class QuizGenerator:
    """
    Generates immutable Quiz snapshots from a question bank.

    Handles:
    - Criteria filtering (category, difficulty, type, tag)
    - Count-based random selection or point-budget greedy selection
    - Question order and option order shuffling
    - Quiz metadata derivation
    """

    def __init__(self, bank: QuestionBank, seed: str | int | None = None):
        self.bank = bank
        if seed is None:
            seed = get_settings().random_seed
        self._rng = make_rng(seed)

    def generate_quiz(
        self,
        title: str | None,
        criteria: QuizCriteria | Mapping[str, Any],
        description: str | None = None,
    ) -> Quiz:
        """
        Generate a quiz from the bank.

        Args:
            title: Quiz title (None derives one from the criteria)
            criteria: Selection criteria
            description: Optional description carried on the quiz

        Returns:
            Immutable Quiz snapshot

        Raises:
            InsufficientQuestionsError: Fewer matching questions than
                ``criteria.total_questions``
        """
        if not isinstance(criteria, QuizCriteria):
            criteria = QuizCriteria.model_validate(criteria)

        available = self.bank.filter(criteria.to_filter())
        if len(available) < criteria.total_questions:
            logger.warning(
                f"Cannot generate quiz: {len(available)} matching questions, "
                f"{criteria.total_questions} requested"
            )
            raise InsufficientQuestionsError(len(available), criteria.total_questions)

        if criteria.total_points is not None:
            selected = select_by_points(available, criteria.total_points, criteria.total_questions)
        else:
            selected = self._select_by_count(available, criteria.total_questions)

        if criteria.shuffle_questions:
            selected = self._shuffled(selected)

        if criteria.shuffle_options:
            selected = [self._shuffle_options(q) for q in selected]

        quiz = Quiz(
            id=f"quiz_{uuid4().hex[:12]}",
            title=title if title is not None else build_quiz_title(criteria),
            description=description,
            questions=tuple(selected),
            total_points=sum(q.points for q in selected),
            estimated_time=calculate_estimated_time(selected),
            difficulty=calculate_overall_difficulty(selected),
            categories=tuple(dict.fromkeys(q.category for q in selected)),
            tags=tuple(dict.fromkeys(tag for q in selected for tag in sorted(q.tags))),
            criteria=criteria,
        )

        logger.info(
            f"Generated quiz {quiz.id} '{quiz.title}': {quiz.question_count} questions, "
            f"{quiz.total_points} points, ~{quiz.estimated_time} min"
        )
        return quiz

    def generate_from_template(
        self,
        registry: QuizTemplateRegistry,
        template_id: str,
        title: str | None = None,
        overrides: Mapping[str, Any] | None = None,
    ) -> Quiz:
        """Generate a quiz from a registered template, titled after it by default."""
        criteria = registry.generate_criteria_from_template(template_id, overrides)
        template = registry.get_template(template_id)
        return self.generate_quiz(
            title if title is not None else template.name,
            criteria,
            description=template.description or None,
        )

    def generate_topic_quiz(self, topic: str, question_count: int = 5) -> Quiz:
        """
        Quiz over every bank category whose name contains ``topic`` (case-insensitive).
        """
        needle = topic.lower()
        categories = tuple(c for c in self.bank.categories() if needle in c.lower()) or (topic,)
        criteria = QuizCriteria(
            total_questions=question_count,
            categories=categories,
            shuffle_questions=True,
            shuffle_options=True,
        )
        return self.generate_quiz(f"{topic} Quiz", criteria)

    def generate_quick_practice(
        self,
        difficulty: DifficultyLevel | str = DifficultyLevel.BEGINNER,
        question_count: int = 5,
    ) -> Quiz:
        criteria = QuizCriteria(
            total_questions=question_count,
            difficulties=(DifficultyLevel(difficulty),),
            time_limit=10,
            shuffle_questions=True,
            shuffle_options=True,
        )
        return self.generate_quiz(None, criteria)

    def generate_skill_assessment(self, question_count: int = 15) -> Quiz:
        """Timed quiz drawn from every category and difficulty."""
        criteria = QuizCriteria(
            total_questions=question_count,
            time_limit=20,
            shuffle_questions=True,
            shuffle_options=True,
        )
        return self.generate_quiz(None, criteria)

    def validate_quiz(self, quiz: Quiz) -> QuizValidation:
        """Check a quiz's structural self-consistency without regenerating it."""
        return validate_quiz(quiz)

    # ========================================
    # Internals
    # ========================================

    def _select_by_count(self, available: list[Question], count: int) -> list[Question]:
        return self._shuffled(available)[:count]

    def _shuffled(self, items: Sequence[T]) -> list[T]:
        shuffled = list(items)
        self._rng.shuffle(shuffled)
        return shuffled

    def _shuffle_options(self, question: Question) -> Question:
        """Copy of ``question`` with its display order permuted; the original is untouched."""
        if isinstance(question, MultipleChoiceQuestion):
            order = list(range(len(question.options)))
            self._rng.shuffle(order)
            new_index = {old: new for new, old in enumerate(order)}

            update: dict[str, Any] = {
                "options": tuple(question.options[i] for i in order),
                "correct_answer": new_index[question.correct_answer],
            }
            if question.correct_answers is not None:
                update["correct_answers"] = tuple(
                    sorted(new_index[i] for i in question.correct_answers)
                )
            return question.model_copy(update=update)

        if isinstance(question, OrderingQuestion):
            return question.model_copy(update={"items": tuple(self._shuffled(question.items))})

        if isinstance(question, MatchingQuestion):
            return question.model_copy(
                update={"right_items": tuple(self._shuffled(question.right_items))}
            )

        return question
