"""Cheap local checks that catch degenerate answers before any AI call."""
import re
from dataclasses import dataclass
from typing import Optional, Set

from interview_grader.models.answer import AIEvaluation

TOO_SHORT = "too short"
GIBBERISH = "gibberish/non-meaningful"
UNRELATED = "unrelated to question"

MIN_MEANINGFUL_LENGTH = 10
UNRELATED_MAX_LENGTH = 50

BANDS = {
    TOO_SHORT: 5,
    GIBBERISH: 8,
    UNRELATED: 12,
}

NON_ANSWERS = {
    "test", "testing", "hi", "hello", "hey", "idk", "i dont know", "i don't know",
    "dont know", "don't know", "no idea", "not sure", "dunno", "nothing", "none",
    "n/a", "na", "ok", "okay", "yes", "no", "pass", "skip", "asdf", "qwerty",
    "lorem ipsum", "blah blah", "no comment", "nothing to say",
}

# Whole answer is one 1-3 letter chunk repeated 5+ times ("ha ha ha ha ha", "abcabcabcabcabc")
_REPEATED_CHUNK = re.compile(r"^\W*([^\W\d_]{1,3})(?:\W*\1){4,}\W*$", re.IGNORECASE)
# A letter repeated 5+ times in a row ("hmmmmm", "aaaaaaaa")
_REPEATED_LETTER = re.compile(r"([^\W\d_])\1{4,}", re.IGNORECASE)
_WORD = re.compile(r"[^\W_]+")

_FEEDBACK = {
    TOO_SHORT: "The answer is too short to evaluate. Explain your reasoning in full sentences.",
    GIBBERISH: "The answer does not contain a meaningful response to the question.",
    UNRELATED: "The answer does not appear to address the question that was asked.",
}

_SUGGESTIONS = {
    TOO_SHORT: [
        "Answer in at least two or three complete sentences",
        "Describe your approach before giving a conclusion",
    ],
    GIBBERISH: [
        "Write a genuine attempt at the question, even if you are unsure",
        "Explain what you know about the topic and where your knowledge stops",
    ],
    UNRELATED: [
        "Re-read the question and address it directly",
        "Use the key terms from the question in your answer",
    ],
}


@dataclass(frozen=True)
class QualityVerdict:
    """Outcome of a failed quality check."""
    reason: str
    band: int

    def to_evaluation(self) -> AIEvaluation:
        """Scores derived from the band; no external call is involved."""
        band = self.band
        return AIEvaluation(
            relevance=band,
            completeness=max(0, band - 5),
            technical_accuracy=max(0, band - 8),
            communication=band + 5,
            overall_score=band,
            feedback=_FEEDBACK[self.reason],
            suggestions=list(_SUGGESTIONS[self.reason]),
            source="quality_gate",
            reason=self.reason,
        )


def _words(text: str, min_length: int) -> Set[str]:
    return {w for w in _WORD.findall(text.lower()) if len(w) >= min_length}


def is_gibberish(text: str) -> bool:
    if not any(ch.isalpha() for ch in text):
        return True
    if _REPEATED_CHUNK.match(text) or _REPEATED_LETTER.search(text):
        return True
    normalized = " ".join(text.lower().split()).strip(" .!?,;:")
    return normalized in NON_ANSWERS


def is_unrelated(question_text: str, answer_text: str) -> bool:
    if len(answer_text) >= UNRELATED_MAX_LENGTH:
        return False
    question_words = _words(question_text, 4)
    if not question_words:
        # Nothing to compare against
        return False
    # Short answer words are ignored too; "a" or "in" is a substring of almost any question word
    answer_words = _words(answer_text, 4)
    for q_word in question_words:
        for a_word in answer_words:
            if q_word in a_word or a_word in q_word:
                return False
    return True


def check_answer_quality(question_text: str, answer_text: str) -> Optional[QualityVerdict]:
    """Run the checks in order and return the first one that fires, if any."""
    text = (answer_text or "").strip()

    if len(text) < MIN_MEANINGFUL_LENGTH:
        return QualityVerdict(TOO_SHORT, BANDS[TOO_SHORT])
    if is_gibberish(text):
        return QualityVerdict(GIBBERISH, BANDS[GIBBERISH])
    if is_unrelated(question_text or "", text):
        return QualityVerdict(UNRELATED, BANDS[UNRELATED])
    return None
