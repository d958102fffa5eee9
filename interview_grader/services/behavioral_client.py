"""HTTP client for the behavioral-signal (facial analysis) service."""
import logging
from typing import Dict, Literal, Optional

import httpx

from interview_grader.config import settings
from interview_grader.exceptions import UpstreamServiceError
from interview_grader.models.answer import EMOTION_CHANNELS, BehavioralAnalysis, EmotionDistribution
from interview_grader.utils.helpers import clamp, round_score

logger = logging.getLogger(__name__)

AnalysisScope = Literal["per_answer", "whole_session"]


def fallback_behavioral_analysis() -> BehavioralAnalysis:
    """Measurement stored when the service cannot be reached."""
    return BehavioralAnalysis(
        confidence=70,
        eye_contact=65,
        speech_clarity=70,
        overall_score=68,
        emotions=EmotionDistribution(neutral=70, happy=20, fear=10),
        feedback="Behavioral analysis service unavailable. Manual review recommended.",
        is_fallback=True,
    )


def _score(raw: Dict, key: str) -> int:
    value = raw.get(key) or 0
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise UpstreamServiceError(f"Behavioral service sent a non-numeric '{key}'")
    return round_score(clamp(value))


def process_analysis(raw: Dict) -> BehavioralAnalysis:
    """Map the service's snake_case payload onto our measurement model."""
    if not isinstance(raw, dict):
        raise UpstreamServiceError("Behavioral service returned an unexpected payload")

    emotions = raw.get("emotions") or {}
    if not isinstance(emotions, dict):
        raise UpstreamServiceError("Behavioral service returned malformed emotions")

    try:
        return BehavioralAnalysis(
            confidence=_score(raw, "confidence"),
            eye_contact=_score(raw, "eye_contact"),
            speech_clarity=_score(raw, "speech_clarity"),
            overall_score=_score(raw, "overall_score"),
            emotions=EmotionDistribution(**{channel: _score(emotions, channel) for channel in EMOTION_CHANNELS}),
            feedback=raw.get("feedback") or "No specific feedback available",
            frame_count=int(raw.get("frame_count") or 0),
            analysis_duration=float(raw.get("analysis_duration") or 0),
        )
    except (TypeError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        raise UpstreamServiceError(f"Behavioral service returned malformed fields: {e}") from e


class BehavioralAnalysisClient:
    """Talks to the behavioral-signal service."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.behavioral_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.behavioral_timeout_seconds
        self.transport = transport

    def client(self) -> httpx.AsyncClient:
        """Get HTTP client with proper headers."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
            transport=self.transport,
        )

    async def analyze(
        self,
        media_reference: str,
        duration: int,
        scope: AnalysisScope,
        interview_id: str,
        user_id: str,
        question_number: Optional[int] = None,
    ) -> BehavioralAnalysis:
        """Analyze one answer's recording or a whole interview's recording."""
        path = "/facial-analysis" if scope == "per_answer" else "/facial-analysis/session"
        payload = {
            "media_reference": media_reference,
            "duration": duration,
            "analysis_type": scope,
            "interview_id": interview_id,
            "user_id": user_id,
        }
        if question_number is not None:
            payload["question_number"] = question_number

        async with self.client() as client:
            try:
                response = await client.post(path, json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                raise UpstreamServiceError(
                    f"Behavioral service error {e.response.status_code}: {e.response.text}"
                ) from e
            except httpx.HTTPError as e:
                raise UpstreamServiceError(f"Behavioral service unreachable: {e}") from e
            except ValueError as e:
                raise UpstreamServiceError("Behavioral service returned invalid JSON") from e

        return process_analysis(data)

    async def analyze_or_fallback(self, **kwargs) -> BehavioralAnalysis:
        """Like :meth:`analyze` but degrades to the fallback measurement."""
        try:
            return await self.analyze(**kwargs)
        except UpstreamServiceError as e:
            logger.warning("Behavioral analysis failed (%s), using fallback", e)
            return fallback_behavioral_analysis()

    async def health_check(self) -> Dict:
        async with self.client() as client:
            try:
                response = await client.get("/health")
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("Behavioral service health check failed: %s", e)
                return {"status": "down", "error": str(e)}
