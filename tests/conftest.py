"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from tsverse_quiz.config import get_settings
from tsverse_quiz.quiz.models import (
    CodeCompletionQuestion,
    FillInBlankQuestion,
    MatchingQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    ShortAnswerQuestion,
    TrueFalseQuestion,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so environment patches take effect per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def loguru_messages():
    """Collect loguru records emitted during a test."""
    messages: list = []
    handler_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(handler_id)


# =============================================================================
# Question Fixtures
# =============================================================================


@pytest.fixture
def make_mc():
    """Factory for multiple choice questions with overridable fields."""

    def _make(**overrides):
        data = {
            "id": "mc-1",
            "category": "TS-Basics",
            "difficulty": "beginner",
            "points": 5,
            "question": "Which keyword declares a block-scoped constant?",
            "options": ["var", "let", "const", "static"],
            "correct_answer": 2,
        }
        data.update(overrides)
        return MultipleChoiceQuestion.model_validate(data)

    return _make


@pytest.fixture
def mc_question(make_mc):
    return make_mc()


@pytest.fixture
def multi_select_question(make_mc):
    return make_mc(
        id="mc-multi",
        question="Which of these are primitive types?",
        options=["string", "Array", "boolean", "Map"],
        allow_multiple=True,
        correct_answers=[0, 2],
    )


@pytest.fixture
def tf_question():
    return TrueFalseQuestion(
        id="tf-1",
        category="TS-Basics",
        difficulty="beginner",
        points=3,
        statement="TypeScript is a superset of JavaScript.",
        correct_answer=True,
    )


@pytest.fixture
def sa_question():
    return ShortAnswerQuestion(
        id="sa-1",
        category="TS-Types",
        difficulty="intermediate",
        points=4,
        question="Which type represents the absence of any value?",
        accepted_answers=["never", "the never type"],
    )


@pytest.fixture
def fib_question():
    return FillInBlankQuestion.model_validate(
        {
            "id": "fib-1",
            "category": "TS-Basics",
            "difficulty": "beginner",
            "points": 2,
            "template": "let x: _____ = 5; let y: _____ = 'a';",
            "blanks": [
                {"position": 1, "correct_answers": ["string"]},
                {"position": 0, "correct_answers": ["number"]},
            ],
        }
    )


@pytest.fixture
def matching_question():
    return MatchingQuestion.model_validate(
        {
            "id": "match-1",
            "category": "TS-Types",
            "difficulty": "intermediate",
            "points": 6,
            "question": "Match each utility type with its effect.",
            "left_items": [
                {"id": "l1", "content": "Partial<T>"},
                {"id": "l2", "content": "Readonly<T>"},
            ],
            "right_items": [
                {"id": "r1", "content": "All properties optional"},
                {"id": "r2", "content": "All properties immutable"},
            ],
            "correct_matches": [
                {"left_id": "l1", "right_id": "r1"},
                {"left_id": "l2", "right_id": "r2"},
            ],
        }
    )


@pytest.fixture
def ordering_question():
    return OrderingQuestion.model_validate(
        {
            "id": "order-1",
            "category": "TS-Tooling",
            "difficulty": "advanced",
            "points": 4,
            "question": "Order the compilation steps.",
            "items": [
                {"id": "parse", "content": "Parse source"},
                {"id": "check", "content": "Type check"},
                {"id": "emit", "content": "Emit JavaScript"},
            ],
            "correct_order": ["parse", "check", "emit"],
        }
    )


@pytest.fixture
def code_question():
    return CodeCompletionQuestion(
        id="code-1",
        category="TS-Functions",
        difficulty="expert",
        points=10,
        description="Complete the generic identity function.",
        code_template="function identity<T>(value: T): T {\n  ____\n}",
        expected_solution="function identity<T>(value: T): T {\n  return value;\n}",
        test_cases=[{"input": [1], "expected_output": 1}],
    )


@pytest.fixture
def every_kind(
    mc_question,
    tf_question,
    sa_question,
    fib_question,
    matching_question,
    ordering_question,
    code_question,
):
    """One question of each supported kind."""
    return [
        mc_question,
        tf_question,
        sa_question,
        fib_question,
        matching_question,
        ordering_question,
        code_question,
    ]


@pytest.fixture
def scenario_questions(make_mc):
    """Three questions worth 5, 3 and 10 points across two categories."""
    return [
        make_mc(id="q5", points=5, category="TS-Basics", tags=["types"]),
        make_mc(id="q3", points=3, category="TS-Basics", tags=["syntax"]),
        make_mc(id="q10", points=10, category="TS-Advanced", difficulty="advanced", tags=["generics"]),
    ]
