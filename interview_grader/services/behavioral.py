"""Session-level summary of per-answer behavioral measurements."""
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from interview_grader.models.answer import EMOTION_CHANNELS, BehavioralAnalysis
from interview_grader.utils.helpers import average, round_score

POSITIVE_EMOTIONS = ("happy", "neutral")
CAUTION_EMOTIONS = ("fear", "sad")

FALLBACK_EMOTIONS = {
    "happy": 30,
    "sad": 10,
    "angry": 5,
    "fear": 15,
    "surprise": 10,
    "disgust": 5,
    "neutral": 25,
}


class BehavioralSummary(BaseModel):
    """Averaged behavioral signals for one interview."""
    average_confidence: int
    average_eye_contact: int
    average_speech_clarity: int
    average_overall_score: int
    average_emotions: Dict[str, int]
    dominant_emotion: str
    feedback: str
    analysis_count: int = 0
    total_frames: int = 0
    total_duration: float = 0
    is_fallback: bool = False

    def describe(self) -> str:
        """One-line description used in narrative prompts."""
        if self.is_fallback:
            return "Behavioral analysis not available"
        return (
            f"Average Confidence: {self.average_confidence}%, "
            f"Eye Contact: {self.average_eye_contact}%, "
            f"Speech Clarity: {self.average_speech_clarity}%, "
            f"Dominant Emotion: {self.dominant_emotion}"
        )


def fallback_summary() -> BehavioralSummary:
    """Mid-range defaults used when no usable measurement exists."""
    return BehavioralSummary(
        average_confidence=70,
        average_eye_contact=65,
        average_speech_clarity=70,
        average_overall_score=68,
        average_emotions=dict(FALLBACK_EMOTIONS),
        dominant_emotion="happy",
        feedback="No behavioral analysis data was available. Manual review recommended.",
        analysis_count=0,
        is_fallback=True,
    )


def _metric_remark(value: int, excellent: str, good: str, poor: str) -> str:
    if value >= 80:
        return excellent
    if value >= 60:
        return good
    return poor


def behavioral_feedback(confidence: int, eye_contact: int, speech_clarity: int, dominant_emotion: str) -> str:
    remarks = [
        _metric_remark(
            confidence,
            "Excellent confidence levels throughout the interview.",
            "Good confidence, with room for slight improvement.",
            "Consider working on building confidence for future interviews.",
        ),
        _metric_remark(
            eye_contact,
            "Maintained excellent eye contact.",
            "Good eye contact, try to maintain it more consistently.",
            "Focus on maintaining better eye contact with the interviewer.",
        ),
        _metric_remark(
            speech_clarity,
            "Speech was clear and well-articulated.",
            "Generally clear speech with minor areas for improvement.",
            "Work on speaking more clearly and at an appropriate pace.",
        ),
    ]
    if dominant_emotion in POSITIVE_EMOTIONS:
        remarks.append("Maintained a positive and professional demeanor.")
    elif dominant_emotion in CAUTION_EMOTIONS:
        remarks.append("Try to project more confidence and positivity during interviews.")
    return " ".join(remarks)


def aggregate_behavioral_signals(records: Iterable[Optional[BehavioralAnalysis]]) -> BehavioralSummary:
    """Average the valid measurements (overall score above zero).

    Returns :func:`fallback_summary` when nothing usable is left. Never raises
    for empty input.
    """
    valid: List[BehavioralAnalysis] = [r for r in (records or []) if r is not None and r.overall_score > 0]
    if not valid:
        return fallback_summary()

    confidence = round_score(average(r.confidence for r in valid))
    eye_contact = round_score(average(r.eye_contact for r in valid))
    speech_clarity = round_score(average(r.speech_clarity for r in valid))
    overall = round_score(average(r.overall_score for r in valid))

    emotions = {
        channel: round_score(average(getattr(r.emotions, channel) for r in valid))
        for channel in EMOTION_CHANNELS
    }
    # max() keeps the first channel on ties
    dominant = max(EMOTION_CHANNELS, key=lambda channel: emotions[channel])

    return BehavioralSummary(
        average_confidence=confidence,
        average_eye_contact=eye_contact,
        average_speech_clarity=speech_clarity,
        average_overall_score=overall,
        average_emotions=emotions,
        dominant_emotion=dominant,
        feedback=behavioral_feedback(confidence, eye_contact, speech_clarity, dominant),
        analysis_count=len(valid),
        total_frames=sum(r.frame_count for r in valid),
        total_duration=sum(r.analysis_duration for r in valid),
    )
