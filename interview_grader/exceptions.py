"""Error taxonomy shared by the services and routers."""
from fastapi import status


class InterviewGraderError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class ValidationError(InterviewGraderError):
    """Malformed or out-of-range input. Never retried."""

    status_code = status.HTTP_400_BAD_REQUEST


class StateError(InterviewGraderError):
    """Lifecycle transition attempted from the wrong state."""

    status_code = status.HTTP_409_CONFLICT


class DuplicateError(InterviewGraderError):
    """An answer or result already exists for the same key."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(InterviewGraderError):
    """Unknown session, question, answer or result."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamServiceError(InterviewGraderError):
    """A collaborator failed, timed out or answered with garbage.

    Services recover from this with their fallback values; it should never
    reach a caller.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
