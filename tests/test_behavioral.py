import pytest

from interview_grader.services.behavioral import aggregate_behavioral_signals, fallback_summary
from tests.helpers import behavioral


@pytest.mark.parametrize("records", [[], None, [None, None], [behavioral(0), behavioral(0)]])
def test_nothing_usable_returns_fallback(records):
    summary = aggregate_behavioral_signals(records)
    assert summary == fallback_summary()
    assert summary.is_fallback
    assert summary.analysis_count == 0
    assert (summary.average_confidence, summary.average_eye_contact,
            summary.average_speech_clarity, summary.average_overall_score) == (70, 65, 70, 68)


def test_zero_scores_are_excluded_from_the_mean():
    summary = aggregate_behavioral_signals([behavioral(80), behavioral(0), behavioral(60)])
    assert summary.average_overall_score == 70
    assert summary.analysis_count == 2
    assert summary.total_frames == 60
    assert summary.total_duration == 3.0
    assert not summary.is_fallback


def test_means_round_half_up():
    summary = aggregate_behavioral_signals([behavioral(70, confidence=80), behavioral(71, confidence=81)])
    assert summary.average_overall_score == 71
    assert summary.average_confidence == 81


def test_none_entries_are_skipped():
    summary = aggregate_behavioral_signals([None, behavioral(90), None])
    assert summary.average_overall_score == 90
    assert summary.analysis_count == 1


def test_dominant_emotion_is_highest_mean():
    records = [
        behavioral(80, emotions={"fear": 70, "neutral": 30}),
        behavioral(80, emotions={"fear": 50, "neutral": 50}),
    ]
    summary = aggregate_behavioral_signals(records)
    assert summary.average_emotions["fear"] == 60
    assert summary.dominant_emotion == "fear"
    assert "project more confidence" in summary.feedback


def test_dominant_emotion_tie_goes_to_earlier_channel():
    summary = aggregate_behavioral_signals([behavioral(80, emotions={"happy": 50, "neutral": 50})])
    assert summary.dominant_emotion == "happy"


def test_feedback_follows_thresholds():
    summary = aggregate_behavioral_signals([behavioral(80, confidence=85)])
    # confidence 85, eye contact 70, speech clarity 72, dominant neutral
    assert "Excellent confidence" in summary.feedback
    assert "Good eye contact" in summary.feedback
    assert "Generally clear speech" in summary.feedback
    assert "positive and professional demeanor" in summary.feedback

    summary = aggregate_behavioral_signals([behavioral(40, confidence=40)])
    assert "building confidence" in summary.feedback


def test_describe_mentions_metrics():
    summary = aggregate_behavioral_signals([behavioral(80)])
    assert "Average Confidence: 75%" in summary.describe()
    assert fallback_summary().describe() == "Behavioral analysis not available"
