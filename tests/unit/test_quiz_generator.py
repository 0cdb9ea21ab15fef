"""
Unit tests for the QuizGenerator.

Tests criteria-based generation, point-budget selection, option
shuffling, metadata derivation and quiz validation.

Run: pytest tests/unit/test_quiz_generator.py -v
"""

from dataclasses import replace

import pytest

from tsverse_quiz.quiz.exceptions import InsufficientQuestionsError, TemplateNotFoundError
from tsverse_quiz.quiz.models import DifficultyLevel, QuizCriteria
from tsverse_quiz.quiz.question_bank import QuestionBank
from tsverse_quiz.quiz.quiz_generator import (
    QuizGenerator,
    build_quiz_title,
    calculate_estimated_time,
    calculate_overall_difficulty,
    greedy_point_selection,
    select_by_points,
    validate_quiz,
)
from tsverse_quiz.quiz.quiz_templates import QuizTemplateRegistry


@pytest.fixture
def bank(scenario_questions):
    return QuestionBank(scenario_questions, seed=1)


@pytest.fixture
def generator(bank):
    return QuizGenerator(bank, seed="generator-tests")


class TestGenerateQuiz:
    """End-to-end generation from criteria."""

    def test_scenario_basics_quiz(self, generator):
        quiz = generator.generate_quiz("t", {"totalQuestions": 2, "categories": ["TS-Basics"]})
        assert quiz.title == "t"
        assert quiz.total_points == 8
        assert quiz.difficulty == DifficultyLevel.BEGINNER
        assert {q.id for q in quiz.questions} == {"q5", "q3"}

    def test_total_points_is_sum(self, generator):
        quiz = generator.generate_quiz("all", QuizCriteria(total_questions=3))
        assert quiz.total_points == sum(q.points for q in quiz.questions)
        assert quiz.question_count == 3

    def test_insufficient_pool_raises(self, generator):
        with pytest.raises(InsufficientQuestionsError) as exc_info:
            generator.generate_quiz("t", QuizCriteria(total_questions=3, categories=["TS-Basics"]))
        assert exc_info.value.available == 2
        assert exc_info.value.requested == 3
        assert "Found 2, needed 3" in str(exc_info.value)

    def test_ids_are_unique(self, generator):
        criteria = QuizCriteria(total_questions=1)
        first = generator.generate_quiz("a", criteria)
        second = generator.generate_quiz("b", criteria)
        assert first.id != second.id
        assert first.id.startswith("quiz_")

    def test_untitled_quiz_uses_derived_title(self, generator):
        criteria = QuizCriteria(total_questions=1, categories=["TS-Advanced"])
        quiz = generator.generate_quiz(None, criteria)
        assert quiz.title == "TS-Advanced Quiz"

    def test_metadata_unions(self, generator):
        quiz = generator.generate_quiz("all", QuizCriteria(total_questions=3))
        assert set(quiz.categories) == {"TS-Basics", "TS-Advanced"}
        assert set(quiz.tags) == {"types", "syntax", "generics"}

    def test_point_budget_selection(self, generator):
        criteria = QuizCriteria(total_questions=2, total_points=8)
        quiz = generator.generate_quiz("budget", criteria)
        assert quiz.total_points == 8

    def test_shuffle_questions_keeps_members(self, generator):
        criteria = QuizCriteria(total_questions=3, shuffle_questions=True)
        quiz = generator.generate_quiz("shuffled", criteria)
        assert {q.id for q in quiz.questions} == {"q5", "q3", "q10"}

    def test_seeded_generators_agree(self, bank):
        criteria = QuizCriteria(total_questions=2, shuffle_questions=True)
        first = QuizGenerator(bank, seed=99).generate_quiz("a", criteria)
        second = QuizGenerator(bank, seed=99).generate_quiz("a", criteria)
        assert [q.id for q in first.questions] == [q.id for q in second.questions]

    def test_generation_does_not_mutate_bank(self, generator, bank):
        before = [q.model_copy() for q in bank]
        generator.generate_quiz("x", QuizCriteria(total_questions=3, shuffle_options=True))
        assert list(bank) == before

    def test_to_dict(self, generator):
        data = generator.generate_quiz("t", QuizCriteria(total_questions=1)).to_dict()
        assert data["title"] == "t"
        assert data["questions"][0]["type"] == "multiple_choice"
        assert data["criteria"]["totalQuestions"] == 1
        assert "createdAt" in data


class TestOptionShuffling:
    """Display-order shuffles preserve the canonical answer."""

    def test_multiple_choice_answer_follows_option(self, make_mc):
        question = make_mc()
        generator = QuizGenerator(QuestionBank([question]), seed=3)
        for _ in range(10):
            shuffled = generator._shuffle_options(question)
            assert sorted(shuffled.options) == sorted(question.options)
            assert shuffled.options[shuffled.correct_answer] == "const"

    def test_multi_select_answers_follow_options(self, multi_select_question):
        generator = QuizGenerator(QuestionBank([multi_select_question]), seed=5)
        shuffled = generator._shuffle_options(multi_select_question)
        chosen = {shuffled.options[i] for i in shuffled.correct_answers}
        assert chosen == {"string", "boolean"}
        assert list(shuffled.correct_answers) == sorted(shuffled.correct_answers)

    def test_ordering_items_shuffled_order_kept(self, ordering_question):
        generator = QuizGenerator(QuestionBank([ordering_question]), seed=5)
        shuffled = generator._shuffle_options(ordering_question)
        assert {i.id for i in shuffled.items} == {"parse", "check", "emit"}
        assert shuffled.correct_order == ordering_question.correct_order

    def test_matching_right_items_shuffled(self, matching_question):
        generator = QuizGenerator(QuestionBank([matching_question]), seed=5)
        shuffled = generator._shuffle_options(matching_question)
        assert shuffled.left_items == matching_question.left_items
        assert set(shuffled.right_items) == set(matching_question.right_items)
        assert shuffled.correct_mapping == matching_question.correct_mapping

    def test_single_answer_index_list_follows_option(self, make_mc):
        question = make_mc(correct_answers=[2])
        generator = QuizGenerator(QuestionBank([question]), seed=9)
        quiz = generator.generate_quiz("t", QuizCriteria(total_questions=1, shuffle_options=True))
        shuffled = quiz.questions[0]
        assert shuffled.options[shuffled.correct_answer] == "const"
        assert [shuffled.options[i] for i in shuffled.correct_answers] == ["const"]

    def test_other_kinds_untouched(self, tf_question):
        generator = QuizGenerator(QuestionBank([tf_question]), seed=5)
        assert generator._shuffle_options(tf_question) is tf_question


class TestPointSelection:
    def test_greedy_never_exceeds_target(self, scenario_questions):
        for target in range(1, 20):
            picked = greedy_point_selection(scenario_questions, target, 3)
            assert sum(q.points for q in picked) <= target

    def test_greedy_stops_on_exact_hit(self, scenario_questions):
        picked = greedy_point_selection(scenario_questions, 8, 3)
        assert [q.points for q in picked] == [3, 5]

    def test_fill_in_reaches_count(self, scenario_questions):
        picked = select_by_points(scenario_questions, 8, 3)
        assert [q.points for q in picked] == [3, 5, 10]
        assert len({q.id for q in picked}) == 3

    def test_fill_in_respects_max(self, scenario_questions):
        picked = select_by_points(scenario_questions, 4, 2)
        assert [q.points for q in picked] == [3, 5]


class TestDerivations:
    def test_overall_difficulty_buckets(self, make_mc):
        beginner = make_mc(id="b", difficulty="beginner")
        intermediate = make_mc(id="i", difficulty="intermediate")
        advanced = make_mc(id="a", difficulty="advanced")
        expert = make_mc(id="e", difficulty="expert")

        assert calculate_overall_difficulty([beginner]) == DifficultyLevel.BEGINNER
        assert calculate_overall_difficulty([beginner, advanced]) == DifficultyLevel.INTERMEDIATE
        assert calculate_overall_difficulty([intermediate, advanced]) == DifficultyLevel.ADVANCED
        assert calculate_overall_difficulty([expert]) == DifficultyLevel.ADVANCED

    def test_overall_difficulty_empty(self):
        with pytest.raises(ValueError):
            calculate_overall_difficulty([])

    def test_estimated_time(self, make_mc, tf_question):
        # 1.5 * 1.2 + 1.0 * 1.0 = 2.8 -> 3
        intermediate_mc = make_mc(difficulty="intermediate")
        assert calculate_estimated_time([intermediate_mc, tf_question]) == 3

    def test_estimated_time_code(self, code_question):
        # 5.0 * 1.8 = 9.0
        assert calculate_estimated_time([code_question]) == 9

    def test_title_from_criteria(self):
        criteria = QuizCriteria(
            total_questions=2,
            categories=["Generics", "Narrowing"],
            difficulties=["beginner"],
            time_limit=10,
        )
        assert build_quiz_title(criteria) == "Generics & Narrowing Quiz (Beginner) - 10 min"

    def test_default_title(self):
        assert build_quiz_title(QuizCriteria(total_questions=1)) == "TypeScript Quiz"


class TestValidateQuiz:
    def test_generated_quiz_is_valid(self, generator):
        quiz = generator.generate_quiz("t", QuizCriteria(total_questions=2))
        report = generator.validate_quiz(quiz)
        assert report.is_valid
        assert report.errors == []

    def test_detects_point_mismatch(self, generator):
        quiz = generator.generate_quiz("t", QuizCriteria(total_questions=2))
        report = validate_quiz(replace(quiz, total_points=quiz.total_points + 1))
        assert not report.is_valid
        assert any("Total points mismatch" in e for e in report.errors)

    def test_detects_blank_title(self, generator):
        quiz = generator.generate_quiz("t", QuizCriteria(total_questions=1))
        report = validate_quiz(replace(quiz, title="   "))
        assert "Quiz must have a title" in report.errors


class TestConvenienceGenerators:
    def test_topic_quiz(self, generator):
        quiz = generator.generate_topic_quiz("basics", question_count=2)
        assert quiz.title == "basics Quiz"
        assert set(quiz.categories) == {"TS-Basics"}
        assert quiz.criteria.shuffle_questions and quiz.criteria.shuffle_options

    def test_topic_quiz_unknown_topic(self, generator):
        with pytest.raises(InsufficientQuestionsError):
            generator.generate_topic_quiz("decorators", question_count=1)

    def test_skill_assessment(self, generator):
        quiz = generator.generate_skill_assessment(question_count=3)
        assert quiz.title == "TypeScript Quiz - 20 min"
        assert quiz.criteria.time_limit == 20
        assert quiz.criteria.difficulties is None
        assert quiz.criteria.shuffle_questions and quiz.criteria.shuffle_options
        assert {q.id for q in quiz.questions} == {"q5", "q3", "q10"}

    def test_skill_assessment_default_size(self, generator):
        with pytest.raises(InsufficientQuestionsError) as exc_info:
            generator.generate_skill_assessment()
        assert exc_info.value.requested == 15

    def test_quick_practice(self, generator):
        quiz = generator.generate_quick_practice("beginner", question_count=2)
        assert quiz.title == "TypeScript Quiz (Beginner) - 10 min"
        assert all(q.difficulty == DifficultyLevel.BEGINNER for q in quiz.questions)

    def test_from_template(self, generator):
        registry = QuizTemplateRegistry()
        registry.create_custom_template(
            {
                "id": "basics-check",
                "name": "Basics Check",
                "description": "Two basics questions",
                "default_criteria": {"total_questions": 2, "categories": ["TS-Basics"]},
                "customizable": ["total_questions"],
            }
        )
        quiz = generator.generate_from_template(registry, "basics-check")
        assert quiz.title == "Basics Check"
        assert quiz.description == "Two basics questions"
        assert quiz.total_points == 8

    def test_from_template_with_override(self, generator):
        registry = QuizTemplateRegistry()
        quiz = generator.generate_from_template(
            registry, "quick-review", title="Warmup", overrides={"totalQuestions": 2}
        )
        assert quiz.title == "Warmup"
        assert quiz.question_count == 2

    def test_from_unknown_template(self, generator):
        with pytest.raises(TemplateNotFoundError):
            generator.generate_from_template(QuizTemplateRegistry(), "missing")
