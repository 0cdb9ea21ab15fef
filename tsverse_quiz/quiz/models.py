"""
Quiz Engine Data Models.

Questions are a closed set of variants discriminated on ``type``. Each
variant carries its own canonical-answer representation; everything else
(difficulty, points, tags, category) is shared metadata.

Serialized field names are camelCase so bank exports stay readable by the
web frontend; Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# Enums
# =============================================================================


class QuestionType(str, Enum):
    """Supported question kinds."""
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    FILL_IN_BLANK = "fill_in_blank"
    MATCHING = "matching"
    ORDERING = "ordering"
    CODE_COMPLETION = "code_completion"


class DifficultyLevel(str, Enum):
    """Question difficulty, lowest to highest."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class EngineModel(BaseModel):
    """Immutable model with camelCase aliases on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _empty_to_none(value: tuple | None) -> tuple | None:
    """An empty filter list constrains nothing."""
    if value is not None and len(value) == 0:
        return None
    return value


# =============================================================================
# Questions
# =============================================================================


class BaseQuestion(EngineModel):
    """Metadata shared by every question kind."""

    id: str = Field(min_length=1)
    category: str
    difficulty: DifficultyLevel
    points: int = Field(gt=0)
    tags: frozenset[str] = frozenset()
    time_limit: int | None = Field(default=None, gt=0)  # seconds
    explanation: str | None = None
    references: tuple[str, ...] = ()

    @field_serializer("tags")
    def _serialize_tags(self, tags: frozenset[str]) -> list[str]:
        return sorted(tags)

    @property
    def question_type(self) -> QuestionType:
        return QuestionType(self.type)


class MultipleChoiceQuestion(BaseQuestion):
    """Pick one option, or a set of options when ``allow_multiple`` is set."""

    type: Literal["multiple_choice"] = "multiple_choice"
    question: str
    options: tuple[str, ...] = Field(min_length=2)
    correct_answer: int = Field(default=0, ge=0)
    allow_multiple: bool = False
    correct_answers: tuple[int, ...] | None = None

    @model_validator(mode="after")
    def _check_answer_indices(self) -> MultipleChoiceQuestion:
        option_count = len(self.options)
        if self.correct_answer >= option_count:
            raise ValueError(
                f"correct_answer {self.correct_answer} is not an index into {option_count} options"
            )
        if self.allow_multiple and not self.correct_answers:
            raise ValueError("correct_answers must be non-empty when allow_multiple is set")
        if self.correct_answers is not None:
            if len(set(self.correct_answers)) != len(self.correct_answers):
                raise ValueError("correct_answers contains duplicate indices")
            out_of_range = [i for i in self.correct_answers if not 0 <= i < option_count]
            if out_of_range:
                raise ValueError(f"correct_answers out of range: {out_of_range}")
        return self


class TrueFalseQuestion(BaseQuestion):
    type: Literal["true_false"] = "true_false"
    statement: str
    correct_answer: bool


class ShortAnswerQuestion(BaseQuestion):
    """Free-text answer compared against a list of accepted strings."""

    type: Literal["short_answer"] = "short_answer"
    question: str
    accepted_answers: tuple[str, ...] = Field(min_length=1)
    case_sensitive: bool = False
    exact_match: bool = False


class Blank(EngineModel):
    """A single gap in a fill-in-blank template."""

    position: int = Field(ge=0)
    correct_answers: tuple[str, ...] = Field(min_length=1)
    case_sensitive: bool = False


class FillInBlankQuestion(BaseQuestion):
    """Template text such as "TypeScript is a _____ of JavaScript"."""

    type: Literal["fill_in_blank"] = "fill_in_blank"
    template: str
    blanks: tuple[Blank, ...] = Field(min_length=1)

    @field_validator("blanks")
    @classmethod
    def _unique_positions(cls, blanks: tuple[Blank, ...]) -> tuple[Blank, ...]:
        positions = [b.position for b in blanks]
        if len(set(positions)) != len(positions):
            raise ValueError("blank positions must be unique")
        return tuple(sorted(blanks, key=lambda b: b.position))


class QuestionItem(EngineModel):
    """An identified piece of content used by matching and ordering questions."""

    id: str = Field(min_length=1)
    content: str


class Match(EngineModel):
    left_id: str
    right_id: str


class MatchingQuestion(BaseQuestion):
    type: Literal["matching"] = "matching"
    question: str
    left_items: tuple[QuestionItem, ...] = Field(min_length=1)
    right_items: tuple[QuestionItem, ...] = Field(min_length=1)
    correct_matches: tuple[Match, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_matches(self) -> MatchingQuestion:
        left_ids = {item.id for item in self.left_items}
        right_ids = {item.id for item in self.right_items}
        seen: set[str] = set()
        for match in self.correct_matches:
            if match.left_id not in left_ids:
                raise ValueError(f"unknown left item: {match.left_id}")
            if match.right_id not in right_ids:
                raise ValueError(f"unknown right item: {match.right_id}")
            if match.left_id in seen:
                raise ValueError(f"left item matched twice: {match.left_id}")
            seen.add(match.left_id)
        return self

    @property
    def correct_mapping(self) -> dict[str, str]:
        return {m.left_id: m.right_id for m in self.correct_matches}


class OrderingQuestion(BaseQuestion):
    type: Literal["ordering"] = "ordering"
    question: str
    items: tuple[QuestionItem, ...] = Field(min_length=2)
    correct_order: tuple[str, ...]

    @model_validator(mode="after")
    def _check_order(self) -> OrderingQuestion:
        item_ids = [item.id for item in self.items]
        if len(set(item_ids)) != len(item_ids):
            raise ValueError("item ids must be unique")
        if sorted(item_ids) != sorted(self.correct_order):
            raise ValueError("correct_order must be a permutation of the item ids")
        return self


class CodeTestCase(EngineModel):
    input: list[Any] = Field(default_factory=list)
    expected_output: Any = None


class CodeCompletionQuestion(BaseQuestion):
    """Complete a code template; graded against ``expected_solution``."""

    type: Literal["code_completion"] = "code_completion"
    description: str
    code_template: str
    language: str = "typescript"
    expected_solution: str
    test_cases: tuple[CodeTestCase, ...] = ()


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        TrueFalseQuestion,
        ShortAnswerQuestion,
        FillInBlankQuestion,
        MatchingQuestion,
        OrderingQuestion,
        CodeCompletionQuestion,
    ],
    Field(discriminator="type"),
]

QUESTION_ADAPTER: TypeAdapter[Question] = TypeAdapter(Question)
QUESTION_LIST_ADAPTER: TypeAdapter[list[Question]] = TypeAdapter(list[Question])


def parse_question(data: Any) -> Question:
    """Build the matching Question variant from a mapping (or pass one through)."""
    if isinstance(data, BaseQuestion):
        return data
    return QUESTION_ADAPTER.validate_python(data)


def dump_question(question: Question) -> dict[str, Any]:
    """Serialize a question with its wire (camelCase) field names."""
    return question.model_dump(mode="json", by_alias=True)


# =============================================================================
# Filtering & Generation Criteria
# =============================================================================


class QuestionFilter(EngineModel):
    """
    Multi-criteria question filter.

    A question matches when it satisfies every supplied dimension. List
    dimensions are membership tests; ``tags`` matches when any requested tag
    is present. Points bounds are inclusive.
    """

    model_config = ConfigDict(extra="forbid")

    categories: tuple[str, ...] | None = None
    difficulties: tuple[DifficultyLevel, ...] | None = None
    types: tuple[QuestionType, ...] | None = None
    tags: tuple[str, ...] | None = None
    min_points: int | None = None
    max_points: int | None = None

    normalize_filter_lists = field_validator(
        "categories", "difficulties", "types", "tags"
    )(_empty_to_none)

    def matches(self, question: BaseQuestion) -> bool:
        if self.categories is not None and question.category not in self.categories:
            return False
        if self.difficulties is not None and question.difficulty not in self.difficulties:
            return False
        if self.types is not None and question.type not in self.types:
            return False
        if self.tags is not None and question.tags.isdisjoint(self.tags):
            return False
        if self.min_points is not None and question.points < self.min_points:
            return False
        if self.max_points is not None and question.points > self.max_points:
            return False
        return True


class QuizCriteria(EngineModel):
    """Selection configuration passed to the quiz generator."""

    model_config = ConfigDict(extra="forbid")

    total_questions: int = Field(gt=0)
    total_points: int | None = Field(default=None, gt=0)
    categories: tuple[str, ...] | None = None
    difficulties: tuple[DifficultyLevel, ...] | None = None
    types: tuple[QuestionType, ...] | None = None
    tags: tuple[str, ...] | None = None
    time_limit: int | None = Field(default=None, gt=0)  # minutes
    shuffle_questions: bool = False
    shuffle_options: bool = False

    normalize_filter_lists = field_validator(
        "categories", "difficulties", "types", "tags"
    )(_empty_to_none)

    def to_filter(self) -> QuestionFilter:
        return QuestionFilter(
            categories=self.categories,
            difficulties=self.difficulties,
            types=self.types,
            tags=self.tags,
        )


class UserAnswer(EngineModel):
    """A learner's submission for one question."""

    question_id: str
    answer: Any = None
    time_spent: float | None = Field(default=None, ge=0)  # seconds


# =============================================================================
# Generated Quiz
# =============================================================================


@dataclass(frozen=True)
class Quiz:
    """
    Immutable snapshot produced by the quiz generator.

    The question tuple never changes after creation; derived fields are
    computed once by the generator.
    """

    id: str
    title: str
    questions: tuple[Question, ...]
    total_points: int
    estimated_time: int  # minutes
    difficulty: DifficultyLevel
    categories: tuple[str, ...]
    tags: tuple[str, ...]
    criteria: QuizCriteria
    description: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the rendering layer."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "questions": [dump_question(q) for q in self.questions],
            "totalPoints": self.total_points,
            "estimatedTime": self.estimated_time,
            "difficulty": self.difficulty.value,
            "categories": list(self.categories),
            "tags": list(self.tags),
            "createdAt": self.created_at.isoformat(),
            "criteria": self.criteria.model_dump(mode="json", by_alias=True),
        }
