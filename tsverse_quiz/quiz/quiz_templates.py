"""
Quiz Template Registry.

Named presets of generation criteria. Each template declares which criteria
fields a caller may override when generating from it.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger
from pydantic import Field, field_validator
from pydantic.alias_generators import to_snake

from .exceptions import TemplateNotFoundError
from .models import DifficultyLevel, EngineModel, QuizCriteria


class QuizTemplate(EngineModel):
    """A named QuizCriteria preset with a list of customizable fields."""

    id: str = Field(min_length=1)
    name: str
    description: str = ""
    default_criteria: QuizCriteria
    customizable: tuple[str, ...] = ()

    @field_validator("customizable")
    @classmethod
    def _known_fields(cls, names: tuple[str, ...]) -> tuple[str, ...]:
        normalized = tuple(to_snake(name) for name in names)
        unknown = [name for name in normalized if name not in QuizCriteria.model_fields]
        if unknown:
            raise ValueError(f"unknown criteria fields: {unknown}")
        return normalized


DEFAULT_TEMPLATES: tuple[QuizTemplate, ...] = (
    QuizTemplate(
        id="beginner-assessment",
        name="Beginner Assessment",
        description="A comprehensive assessment for beginners",
        default_criteria=QuizCriteria(
            total_questions=10,
            difficulties=(DifficultyLevel.BEGINNER,),
            time_limit=15,
        ),
        customizable=("total_questions", "time_limit", "categories", "tags"),
    ),
    QuizTemplate(
        id="quick-review",
        name="Quick Review",
        description="A short quiz for quick knowledge review",
        default_criteria=QuizCriteria(
            total_questions=5,
            difficulties=(DifficultyLevel.BEGINNER, DifficultyLevel.INTERMEDIATE),
            time_limit=10,
        ),
        customizable=("total_questions", "difficulties", "categories"),
    ),
    QuizTemplate(
        id="certification-prep",
        name="Certification Preparation",
        description="Comprehensive quiz for certification preparation",
        default_criteria=QuizCriteria(
            total_questions=25,
            difficulties=(DifficultyLevel.INTERMEDIATE, DifficultyLevel.ADVANCED),
            time_limit=45,
        ),
        customizable=("total_questions", "time_limit"),
    ),
    QuizTemplate(
        id="topic-focused",
        name="Topic-Focused Assessment",
        description="Deep dive into a specific topic",
        default_criteria=QuizCriteria(
            total_questions=15,
            difficulties=(
                DifficultyLevel.BEGINNER,
                DifficultyLevel.INTERMEDIATE,
                DifficultyLevel.ADVANCED,
            ),
            time_limit=25,
        ),
        customizable=("total_questions", "difficulties", "time_limit", "categories", "tags"),
    ),
)


class QuizTemplateRegistry:
    """Registry of quiz templates keyed by id."""

    def __init__(
        self,
        templates: Iterable[QuizTemplate | Mapping[str, Any]] | None = None,
        include_defaults: bool = True,
    ):
        self._templates: dict[str, QuizTemplate] = {}

        if include_defaults:
            for template in DEFAULT_TEMPLATES:
                self._templates[template.id] = template

        for template in templates or ():
            self.create_custom_template(template)

    def get_template(self, template_id: str) -> QuizTemplate | None:
        return self._templates.get(template_id)

    def get_all_templates(self) -> list[QuizTemplate]:
        return list(self._templates.values())

    def create_custom_template(self, template: QuizTemplate | Mapping[str, Any]) -> QuizTemplate:
        """Register a template, replacing any with the same id."""
        if not isinstance(template, QuizTemplate):
            template = QuizTemplate.model_validate(template)
        self._templates[template.id] = template
        logger.debug(f"Registered quiz template: {template.id}")
        return template

    def remove_template(self, template_id: str) -> bool:
        return self._templates.pop(template_id, None) is not None

    # ========================================
    # Filtered views
    # ========================================

    def by_difficulty(self, difficulty: DifficultyLevel | str) -> list[QuizTemplate]:
        """Templates that may draw questions of ``difficulty``."""
        difficulty = DifficultyLevel(difficulty)
        return [
            t for t in self._templates.values()
            if t.default_criteria.difficulties is None
            or difficulty in t.default_criteria.difficulties
        ]

    def by_question_count_range(self, minimum: int, maximum: int) -> list[QuizTemplate]:
        return [
            t for t in self._templates.values()
            if minimum <= t.default_criteria.total_questions <= maximum
        ]

    def by_max_time_limit(self, max_minutes: int) -> list[QuizTemplate]:
        return [
            t for t in self._templates.values()
            if t.default_criteria.time_limit is not None
            and t.default_criteria.time_limit <= max_minutes
        ]

    # ========================================
    # Criteria generation
    # ========================================

    def generate_criteria_from_template(
        self,
        template_id: str,
        overrides: Mapping[str, Any] | None = None,
    ) -> QuizCriteria:
        """
        Build generation criteria from a template.

        Overrides are applied only for fields listed in the template's
        ``customizable`` list; any other key is ignored with a warning.

        Args:
            template_id: Registered template id
            overrides: Field overrides (snake_case or camelCase keys)

        Returns:
            Validated QuizCriteria

        Raises:
            TemplateNotFoundError: Unknown template id
        """
        template = self._templates.get(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)

        if not overrides:
            return template.default_criteria

        applied: dict[str, Any] = {}
        ignored: list[str] = []
        for key, value in overrides.items():
            name = to_snake(key)
            if name in template.customizable:
                applied[name] = value
            else:
                ignored.append(key)

        if ignored:
            logger.warning(
                f"Template '{template_id}' ignores non-customizable overrides: {', '.join(ignored)}"
            )

        if not applied:
            return template.default_criteria

        data = template.default_criteria.model_dump()
        data.update(applied)
        return QuizCriteria.model_validate(data)
