"""Errors raised by the quiz engine."""

from __future__ import annotations


class QuizEngineError(Exception):
    """Base class for quiz engine failures."""


class InsufficientQuestionsError(QuizEngineError):
    """Raised when the filtered pool cannot satisfy the requested question count."""

    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Not enough questions available. Found {available}, needed {requested}"
        )


class TemplateNotFoundError(QuizEngineError):
    """Raised when a quiz template id is not registered."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template with id {template_id} not found")


class FormatError(QuizEngineError):
    """Raised when a question bank payload cannot be imported."""
