import pytest

from interview_grader.services.quality_gate import (
    GIBBERISH,
    TOO_SHORT,
    UNRELATED,
    QualityVerdict,
    check_answer_quality,
)

QUESTION = "What is a Python decorator and when would you use one?"


def test_ok_is_too_short_with_band_five():
    verdict = check_answer_quality(QUESTION, "ok")
    assert verdict == QualityVerdict(TOO_SHORT, 5)

    evaluation = verdict.to_evaluation()
    assert evaluation.relevance == 5
    assert evaluation.completeness == 0
    assert evaluation.technical_accuracy == 0
    assert evaluation.communication == 10
    assert evaluation.overall_score == 5
    assert evaluation.source == "quality_gate"
    assert evaluation.reason == TOO_SHORT


def test_length_is_measured_after_trimming():
    assert check_answer_quality(QUESTION, "   short    ").reason == TOO_SHORT


@pytest.mark.parametrize("answer", [
    "hahahahahahahaha",
    "ha ha ha ha ha ha",
    "hmmmmmmm decorators",
    "1234567890 42",
    "!!!??? ... ---",
    "I don't know",
    "  i dont know.  ",
])
def test_gibberish_and_non_answers(answer):
    verdict = check_answer_quality(QUESTION, answer)
    assert verdict.reason == GIBBERISH
    assert verdict.band == 8


def test_gibberish_scores():
    evaluation = QualityVerdict(GIBBERISH, 8).to_evaluation()
    assert (evaluation.relevance, evaluation.completeness, evaluation.technical_accuracy,
            evaluation.communication, evaluation.overall_score) == (8, 3, 0, 13, 8)


def test_short_answer_without_overlap_is_unrelated():
    verdict = check_answer_quality(QUESTION, "I enjoy cooking pasta")
    assert verdict.reason == UNRELATED
    evaluation = verdict.to_evaluation()
    assert (evaluation.relevance, evaluation.completeness, evaluation.technical_accuracy,
            evaluation.communication, evaluation.overall_score) == (12, 7, 4, 17, 12)


def test_overlap_by_substring_counts_as_related():
    assert check_answer_quality(QUESTION, "Decorators wrap functions") is None


def test_long_answers_skip_the_overlap_check():
    answer = "I would probably start by reading the documentation carefully first."
    assert len(answer) >= 50
    assert check_answer_quality(QUESTION, answer) is None


def test_genuine_answer_passes():
    answer = "A decorator is a callable that wraps another function to extend its behaviour."
    assert check_answer_quality(QUESTION, answer) is None


def test_code_with_digits_is_not_gibberish():
    answer = "@lru_cache(maxsize=1000) on a python function memoizes it"
    assert check_answer_quality(QUESTION, answer) is None


def test_first_matching_check_wins():
    # Too short and also a non-answer
    assert check_answer_quality(QUESTION, "idk").reason == TOO_SHORT


def test_short_answer_words_do_not_count_as_overlap():
    question = "Explain how database indexes speed up queries."
    # "in" and "a" are substrings of "explain" and "database"
    verdict = check_answer_quality(question, "I use it in a db a lot")
    assert verdict.reason == UNRELATED
