"""
Question Bank for in-memory question management and selection.

Handles indexed storage, multi-criteria filtering, randomized sampling with
reproducible seeds, bank statistics, and JSON import/export.
"""
from __future__ import annotations

import hashlib
import json
import random
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from pydantic import ValidationError

from ..config import get_settings
from .exceptions import FormatError
from .models import (
    QUESTION_LIST_ADAPTER,
    DifficultyLevel,
    Question,
    QuestionFilter,
    QuestionType,
    QuizCriteria,
    dump_question,
    parse_question,
)

FilterInput = QuestionFilter | QuizCriteria | Mapping[str, Any] | None

_UNSET: Any = object()


def create_seed(seed: str | int) -> int:
    """Create a reproducible integer seed from string or int."""
    if isinstance(seed, int):
        return seed

    # Hash string to create seed
    hash_bytes = hashlib.sha256(str(seed).encode()).digest()
    return int.from_bytes(hash_bytes[:8], byteorder="big")


def make_rng(seed: str | int | None = None) -> random.Random:
    """Independent random source; unseeded when ``seed`` is None."""
    return random.Random(create_seed(seed) if seed is not None else None)


def coerce_filter(criteria: FilterInput = None, **overrides: Any) -> QuestionFilter | None:
    """Normalize the accepted filter spellings into a QuestionFilter."""
    if isinstance(criteria, QuizCriteria):
        criteria = criteria.to_filter()

    if isinstance(criteria, QuestionFilter):
        if not overrides:
            return criteria
        data: dict[str, Any] = criteria.model_dump(exclude_none=True)
    elif criteria is None:
        if not overrides:
            return None
        data = {}
    else:
        data = dict(criteria)

    data.update(overrides)
    return QuestionFilter.model_validate(data)


@dataclass
class BankStatistics:
    """Counts of bank questions partitioned by each discriminant field."""
    total_questions: int
    category_counts: dict[str, int]
    difficulty_counts: dict[DifficultyLevel, int]
    type_counts: dict[QuestionType, int]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "totalQuestions": self.total_questions,
            "categoryCounts": dict(self.category_counts),
            "difficultyCounts": {k.value: v for k, v in self.difficulty_counts.items()},
            "typeCounts": {k.value: v for k, v in self.type_counts.items()},
        }


class QuestionBank:
    """
    Indexed, in-memory collection of questions.

    Handles:
    - Insertion (last write wins), removal and lookup by id
    - Category and tag indices kept consistent with the stored questions
    - Multi-criteria filtering and random sampling
    - Statistics and JSON import/export

    The bank is not synchronized; callers sharing one across threads must
    provide their own locking.
    """

    def __init__(
        self,
        questions: Iterable[Question | Mapping[str, Any]] | None = None,
        seed: str | int | None = None,
    ):
        self._questions: dict[str, Question] = {}
        self._categories: set[str] = set()
        self._tags: set[str] = set()

        if seed is None:
            seed = get_settings().random_seed
        self._rng = make_rng(seed)

        if questions is not None:
            self.add_many(questions)

    # ========================================
    # Mutation
    # ========================================

    def add(self, question: Question | Mapping[str, Any]) -> Question:
        """
        Insert a question, replacing any existing question with the same id.

        Args:
            question: Question model or its mapping representation

        Returns:
            The stored Question
        """
        question = parse_question(question)
        replaced = question.id in self._questions
        self._questions[question.id] = question

        if replaced:
            # The replaced question may have been the last holder of a category or tag
            self._rebuild_indices()
            logger.debug(f"Replaced question {question.id}")
        else:
            self._categories.add(question.category)
            self._tags.update(question.tags)
            logger.debug(f"Added question {question.id} ({question.type}, {question.category})")

        return question

    def add_many(self, questions: Iterable[Question | Mapping[str, Any]]) -> int:
        """Add several questions; returns how many were stored."""
        count = 0
        for question in questions:
            self.add(question)
            count += 1
        return count

    def remove(self, question_id: str) -> bool:
        """Remove a question by id. Returns False if it was not present."""
        if question_id not in self._questions:
            return False

        del self._questions[question_id]
        self._rebuild_indices()
        logger.debug(f"Removed question {question_id}")
        return True

    def clear(self) -> None:
        self._questions.clear()
        self._rebuild_indices()

    def _rebuild_indices(self) -> None:
        self._categories = {q.category for q in self._questions.values()}
        self._tags = {tag for q in self._questions.values() for tag in q.tags}

    # ========================================
    # Lookup
    # ========================================

    def get(self, question_id: str) -> Question | None:
        return self._questions.get(question_id)

    def all(self) -> list[Question]:
        return list(self._questions.values())

    def count(self) -> int:
        return len(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._questions

    def __iter__(self) -> Iterator[Question]:
        return iter(list(self._questions.values()))

    def categories(self) -> list[str]:
        return sorted(self._categories)

    def tags(self) -> list[str]:
        return sorted(self._tags)

    def by_category(self, category: str) -> list[Question]:
        return [q for q in self._questions.values() if q.category == category]

    def by_difficulty(self, difficulty: DifficultyLevel | str) -> list[Question]:
        difficulty = DifficultyLevel(difficulty)
        return [q for q in self._questions.values() if q.difficulty == difficulty]

    def by_tags(self, tags: Iterable[str]) -> list[Question]:
        """Questions carrying at least one of ``tags``."""
        wanted = set(tags)
        return [q for q in self._questions.values() if not q.tags.isdisjoint(wanted)]

    # ========================================
    # Filtering & Sampling
    # ========================================

    def filter(self, criteria: FilterInput = None, **kwargs: Any) -> list[Question]:
        """
        Return the questions matching every supplied filter dimension.

        Args:
            criteria: QuestionFilter, QuizCriteria, or a mapping of filter fields
            **kwargs: Filter fields, overriding those in ``criteria``

        Returns:
            Matching questions in insertion order
        """
        question_filter = coerce_filter(criteria, **kwargs)
        if question_filter is None:
            return self.all()
        return [q for q in self._questions.values() if question_filter.matches(q)]

    def random_sample(
        self,
        count: int,
        criteria: FilterInput = None,
        seed: str | int | None = None,
    ) -> list[Question]:
        """
        Select up to ``count`` random questions, optionally filtered first.

        Returns every available question when fewer than ``count`` match.

        Args:
            count: Number of questions wanted
            criteria: Optional filter applied before sampling
            seed: Random seed for reproducibility (e.g., user_id + attempt_number)

        Returns:
            Distinct questions, at most ``count`` of them
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        available = self.filter(criteria)
        rng = make_rng(seed) if seed is not None else self._rng

        rng.shuffle(available)
        selected = available[:count]
        logger.debug(f"Sampled {len(selected)} of {len(available)} candidate questions")
        return selected

    # ========================================
    # Statistics
    # ========================================

    def statistics(self) -> BankStatistics:
        category_counts: dict[str, int] = {}
        difficulty_counts = {level: 0 for level in DifficultyLevel}
        type_counts = {kind: 0 for kind in QuestionType}

        for question in self._questions.values():
            category_counts[question.category] = category_counts.get(question.category, 0) + 1
            difficulty_counts[question.difficulty] += 1
            type_counts[question.question_type] += 1

        return BankStatistics(
            total_questions=len(self._questions),
            category_counts=category_counts,
            difficulty_counts=difficulty_counts,
            type_counts=type_counts,
        )

    # ========================================
    # Import / Export
    # ========================================

    def to_payload(self) -> dict[str, Any]:
        return {
            "questions": [dump_question(q) for q in self._questions.values()],
            "metadata": {
                "totalQuestions": self.count(),
                "categories": self.categories(),
                "tags": self.tags(),
                "exportDate": datetime.now(timezone.utc).isoformat(),
            },
        }

    def export_json(self, indent: int | None = _UNSET) -> str:
        """Serialize the full question set plus a metadata block."""
        if indent is _UNSET:
            indent = get_settings().export_indent
        return json.dumps(self.to_payload(), indent=indent, ensure_ascii=False)

    def import_json(self, text: str | bytes) -> int:
        """
        Merge questions from a JSON export into the bank.

        Every record is validated before any is added, so a failed import
        leaves the bank unchanged.

        Args:
            text: JSON text with a top-level ``questions`` array

        Returns:
            Number of imported question records

        Raises:
            FormatError: Malformed JSON, missing ``questions`` array, or an
                invalid question record
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            logger.warning(f"Rejected question import: {e}")
            raise FormatError(f"Invalid JSON format: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("questions"), list):
            logger.warning("Rejected question import: no 'questions' array")
            raise FormatError("Payload must be an object containing a 'questions' array")

        try:
            questions = QUESTION_LIST_ADAPTER.validate_python(data["questions"])
        except ValidationError as e:
            logger.warning(f"Rejected question import: {e.error_count()} invalid field(s)")
            raise FormatError(f"Invalid question record: {e}") from e

        imported = self.add_many(questions)
        logger.info(f"Imported {imported} questions ({self.count()} in bank)")
        return imported
