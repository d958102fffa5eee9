import pytest
from bson import ObjectId
from pydantic import ValidationError

from interview_grader.models.interview import InterviewQuestion, InterviewSession
from interview_grader.models.result import CategoryScores, FinalResult, grade_for
from interview_grader.utils.helpers import pagination_meta, round_score
from tests.helpers import make_questions


def result_with(overall, **overrides):
    fields = dict(
        interview_id=ObjectId(),
        user_id=ObjectId(),
        overall_score=overall,
        category_scores=CategoryScores(
            technical_knowledge=overall, communication=overall, problem_solving=overall,
            confidence=overall, behavioral_signal=overall,
        ),
        detailed_feedback="Feedback",
        questions_answered=3,
        total_questions=5,
    )
    fields.update(overrides)
    return FinalResult(**fields)


@pytest.mark.parametrize("score,grade", [
    (100, "A+"), (95, "A+"), (94, "A"), (90, "A"), (89, "B+"), (85, "B+"), (84, "B"), (80, "B"),
    (79, "C+"), (75, "C+"), (74, "C"), (70, "C"), (69, "D"), (60, "D"), (59, "F"), (0, "F"),
])
def test_grade_ladder(score, grade):
    assert grade_for(score) == grade
    assert result_with(score).grade == grade


def test_seventy_four_passes_sixty_nine_fails():
    passed = result_with(74)
    assert (passed.grade, passed.passed) == ("C", True)
    failed = result_with(69)
    assert (failed.grade, failed.passed) == ("D", False)


def test_stored_grade_is_recomputed_on_load():
    result = result_with(91, grade="F", passed=False, completion_percentage=0)
    assert result.grade == "A"
    assert result.passed is True
    assert result.completion_percentage == 60

    reloaded = FinalResult(**{**result.to_document(), "grade": "D"})
    assert reloaded.grade == "A"


@pytest.mark.parametrize("score,level", [
    (90, "Excellent"), (80, "Very Good"), (70, "Good"), (60, "Average"), (50, "Below Average"), (49, "Poor"),
])
def test_performance_level(score, level):
    assert result_with(score).performance_level == level


def test_question_numbers_must_be_contiguous():
    questions = make_questions(3)
    InterviewSession(user_id=ObjectId(), number_of_questions=3, questions=questions)

    gap = [questions[0], InterviewQuestion(question_number=3, question_text="Q3?")]
    with pytest.raises(ValidationError):
        InterviewSession(user_id=ObjectId(), number_of_questions=3, questions=gap)

    repeated = [questions[0], questions[0]]
    with pytest.raises(ValidationError):
        InterviewSession(user_id=ObjectId(), number_of_questions=3, questions=repeated)


def test_question_count_bounds():
    with pytest.raises(ValidationError):
        InterviewSession(user_id=ObjectId(), number_of_questions=2)
    with pytest.raises(ValidationError):
        InterviewSession(user_id=ObjectId(), number_of_questions=21)


def test_round_score_rounds_half_up():
    assert round_score(86.5) == 87
    assert round_score(85.5) == 86
    assert round_score(86.25) == 86


def test_pagination_meta():
    assert pagination_meta(2, 10, 25) == {
        "page": 2, "limit": 10, "total": 25, "pages": 3, "has_next": True, "has_prev": True,
    }
    assert pagination_meta(1, 10, 0)["pages"] == 0
