"""
Quiz module for question management and quiz generation.

This module provides:
- QuestionBank: Indexed question storage with filtering and sampling
- QuizTemplateRegistry: Named generation presets
- QuizGenerator: Criteria-driven quiz assembly

Question Types:
- multiple_choice: One option, or a set when multi-select
- true_false: True/False statement
- short_answer: Free text against accepted answers
- fill_in_blank: Template with positioned blanks
- matching: Pair left items with right items
- ordering: Arrange items into sequence
- code_completion: Complete a code template
"""

from .exceptions import (
    FormatError,
    InsufficientQuestionsError,
    QuizEngineError,
    TemplateNotFoundError,
)
from .models import (
    Blank,
    CodeCompletionQuestion,
    CodeTestCase,
    DifficultyLevel,
    FillInBlankQuestion,
    Match,
    MatchingQuestion,
    MultipleChoiceQuestion,
    OrderingQuestion,
    Question,
    QuestionFilter,
    QuestionItem,
    QuestionType,
    Quiz,
    QuizCriteria,
    ShortAnswerQuestion,
    TrueFalseQuestion,
    UserAnswer,
    dump_question,
    parse_question,
)
from .question_bank import BankStatistics, QuestionBank
from .quiz_generator import QuizGenerator, QuizValidation, validate_quiz
from .quiz_templates import DEFAULT_TEMPLATES, QuizTemplate, QuizTemplateRegistry

__all__ = [
    # Errors
    "QuizEngineError",
    "InsufficientQuestionsError",
    "TemplateNotFoundError",
    "FormatError",
    # Questions
    "QuestionType",
    "DifficultyLevel",
    "Question",
    "MultipleChoiceQuestion",
    "TrueFalseQuestion",
    "ShortAnswerQuestion",
    "FillInBlankQuestion",
    "Blank",
    "MatchingQuestion",
    "QuestionItem",
    "Match",
    "OrderingQuestion",
    "CodeCompletionQuestion",
    "CodeTestCase",
    "parse_question",
    "dump_question",
    # Selection
    "QuestionFilter",
    "QuizCriteria",
    "UserAnswer",
    "Quiz",
    # Components
    "QuestionBank",
    "BankStatistics",
    "QuizTemplate",
    "QuizTemplateRegistry",
    "DEFAULT_TEMPLATES",
    "QuizGenerator",
    "QuizValidation",
    "validate_quiz",
]
