"""
Quiz Scorer.

Grades a set of user answers against a question list, aggregates points
into a percentage and letter grade, and derives a few coarse analytics
hints from the result.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from ..config import Settings, get_settings
from ..quiz.models import Question, QuestionType, Quiz, UserAnswer
from .validator import AnswerValidator

# =============================================================================
# Grade Table
# =============================================================================

# (minimum percentage, grade), highest first
GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (97, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (65, "D"),
)
FAILING_GRADE = "F"

STRONG_AREA_LABEL = "Overall Performance"
WEAK_AREA_LABEL = "Needs Improvement"
REVIEW_SUGGESTION = "Review the material and practice more"
PACING_SUGGESTION = "Work on time management"


def calculate_grade(percentage: float) -> str:
    """Letter grade for a percentage."""
    for minimum, grade in GRADE_THRESHOLDS:
        if percentage >= minimum:
            return grade
    return FAILING_GRADE


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class QuestionResult:
    """Outcome of one question."""

    question_id: str
    question_type: QuestionType
    correct: bool
    points_earned: int
    points_possible: int
    user_answer: Any
    correct_answer: Any
    feedback: str
    time_spent: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "questionType": self.question_type.value,
            "correct": self.correct,
            "pointsEarned": self.points_earned,
            "pointsPossible": self.points_possible,
            "userAnswer": self.user_answer,
            "correctAnswer": self.correct_answer,
            "feedback": self.feedback,
            "timeSpent": self.time_spent,
        }


@dataclass(frozen=True)
class QuizResult:
    """
    Aggregate outcome of a scored quiz.

    ``results`` follows the order of the scored questions.
    """

    total_score: int
    total_possible: int
    percentage: float
    questions_correct: int
    questions_total: int
    time_spent: float  # seconds
    grade: str
    passing_percentage: float
    results: tuple[QuestionResult, ...] = ()

    @property
    def passed(self) -> bool:
        return self.percentage >= self.passing_percentage

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "totalScore": self.total_score,
            "totalPossible": self.total_possible,
            "percentage": self.percentage,
            "questionsCorrect": self.questions_correct,
            "questionsTotal": self.questions_total,
            "timeSpent": self.time_spent,
            "grade": self.grade,
            "passed": self.passed,
            "passingPercentage": self.passing_percentage,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class QuizAnalytics:
    average_time_per_question: float  # seconds
    strong_areas: list[str] = field(default_factory=list)
    weak_areas: list[str] = field(default_factory=list)
    improvement_suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "averageTimePerQuestion": self.average_time_per_question,
            "strongAreas": list(self.strong_areas),
            "weakAreas": list(self.weak_areas),
            "improvementSuggestions": list(self.improvement_suggestions),
        }


# =============================================================================
# Scorer
# =============================================================================


class QuizScorer:
    """
    Scores user answers against questions.

    Example:
        scorer = QuizScorer()
        result = scorer.score_quiz(quiz, answers)
        if result.passed:
            ...
    """

    def __init__(
        self,
        validator: AnswerValidator | None = None,
        settings: Settings | None = None,
    ):
        self.validator = validator or AnswerValidator()
        self.settings = settings or get_settings()

    def score(
        self,
        questions: Sequence[Question],
        user_answers: Iterable[UserAnswer | Mapping[str, Any]],
        passing_percentage: float | None = None,
    ) -> QuizResult:
        """
        Score answers against a question list.

        Unanswered questions count as incorrect with zero points. When a
        question is answered more than once, the last answer wins.

        Args:
            questions: Questions in display order
            user_answers: Submissions as UserAnswer objects or mappings
            passing_percentage: Pass threshold (defaults to settings)

        Returns:
            QuizResult with one QuestionResult per question
        """
        if passing_percentage is None:
            passing_percentage = self.settings.passing_percentage
        if not 0 <= passing_percentage <= 100:
            raise ValueError(f"passing_percentage must be within 0..100, got {passing_percentage}")

        answers = self._index_answers(user_answers)

        results: list[QuestionResult] = []
        total_score = 0
        total_possible = 0
        questions_correct = 0
        time_spent = 0.0

        for question in questions:
            total_possible += question.points
            submitted = answers.get(question.id)

            if submitted is None:
                correct = False
                answer_value = None
                answer_time = None
            else:
                answer_value = submitted.answer
                answer_time = submitted.time_spent
                correct = self.validator.validate(question, answer_value)

            points_earned = question.points if correct else 0
            if correct:
                total_score += points_earned
                questions_correct += 1
            if answer_time:
                time_spent += answer_time

            results.append(
                QuestionResult(
                    question_id=question.id,
                    question_type=question.question_type,
                    correct=correct,
                    points_earned=points_earned,
                    points_possible=question.points,
                    user_answer=answer_value,
                    correct_answer=self.validator.correct_answer(question),
                    feedback=self.validator.feedback(question, correct),
                    time_spent=answer_time,
                )
            )

        percentage = total_score / total_possible * 100 if total_possible > 0 else 0.0

        result = QuizResult(
            total_score=total_score,
            total_possible=total_possible,
            percentage=percentage,
            questions_correct=questions_correct,
            questions_total=len(results),
            time_spent=time_spent,
            grade=calculate_grade(percentage),
            passing_percentage=passing_percentage,
            results=tuple(results),
        )

        logger.debug(
            f"Scored {result.questions_correct}/{result.questions_total} correct, "
            f"{result.total_score}/{result.total_possible} points ({result.percentage:.1f}%, {result.grade})"
        )
        return result

    def score_quiz(
        self,
        quiz: Quiz,
        user_answers: Iterable[UserAnswer | Mapping[str, Any]],
        passing_percentage: float | None = None,
    ) -> QuizResult:
        """Score a generated quiz snapshot."""
        return self.score(quiz.questions, user_answers, passing_percentage)

    def analytics(self, result: QuizResult) -> QuizAnalytics:
        """
        Coarse performance hints for a scored quiz.

        Only overall percentage and pacing are considered; per-category
        breakdowns are out of scope.
        """
        thresholds = self.settings.get_analytics_config()

        average_time = (
            result.time_spent / result.questions_total if result.questions_total > 0 else 0.0
        )

        strong_areas: list[str] = []
        weak_areas: list[str] = []
        suggestions: list[str] = []

        if result.percentage >= thresholds["strong_threshold"]:
            strong_areas.append(STRONG_AREA_LABEL)

        if result.percentage < thresholds["weak_threshold"]:
            weak_areas.append(WEAK_AREA_LABEL)
            suggestions.append(REVIEW_SUGGESTION)

        if average_time > thresholds["slow_answer_seconds"]:
            suggestions.append(PACING_SUGGESTION)

        return QuizAnalytics(
            average_time_per_question=average_time,
            strong_areas=strong_areas,
            weak_areas=weak_areas,
            improvement_suggestions=suggestions,
        )

    def _index_answers(
        self, user_answers: Iterable[UserAnswer | Mapping[str, Any]]
    ) -> dict[str, UserAnswer]:
        indexed: dict[str, UserAnswer] = {}
        for answer in user_answers:
            if not isinstance(answer, UserAnswer):
                answer = UserAnswer.model_validate(answer)
            indexed[answer.question_id] = answer
        return indexed
