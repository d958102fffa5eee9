"""Small numeric helpers shared by the scoring code."""
import math
from typing import Iterable


def round_score(value: float) -> int:
    """Round half up, the way scores are shown to candidates (86.5 -> 87)."""
    return int(math.floor(value + 0.5))


def average(values: Iterable[float]) -> float:
    """Arithmetic mean, 0 for an empty input."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def pagination_meta(page: int, limit: int, total: int) -> dict:
    """Pagination block returned by list endpoints."""
    pages = (total + limit - 1) // limit if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
        "has_next": page * limit < total,
        "has_prev": page > 1,
    }
