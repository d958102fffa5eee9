"""Read-side views over a candidate's stored results."""
from collections import Counter
from typing import Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from interview_grader.exceptions import NotFoundError, ValidationError
from interview_grader.models.common import parse_object_id
from interview_grader.models.result import FinalResult
from interview_grader.services.result_compiler import CATEGORY_WEIGHTS
from interview_grader.utils.helpers import average, pagination_meta, round_score

SORT_FIELDS = {
    "created_at": ("created_at", 1),
    "-created_at": ("created_at", -1),
    "overall_score": ("overall_score", 1),
    "-overall_score": ("overall_score", -1),
}
NEEDS_IMPROVEMENT_BELOW = 70
RECENT_RESULTS = 5


def improvement_trend(scores: List[int]) -> int:
    """Mean of the later half minus mean of the earlier half."""
    if len(scores) < 2:
        return 0
    mid = len(scores) // 2
    return round_score(average(scores[mid:]) - average(scores[:mid]))


def category_trends(results: List[FinalResult]) -> Dict[str, Dict]:
    """Per-category average, best, latest and first-to-latest change.

    Categories with no score above zero are left out.
    """
    trends = {}
    for category in CATEGORY_WEIGHTS:
        scores = [getattr(r.category_scores, category) for r in results]
        scores = [s for s in scores if s > 0]
        if not scores:
            continue
        trends[category] = {
            "average": round_score(average(scores)),
            "best": max(scores),
            "latest": scores[-1],
            "trend": scores[-1] - scores[0] if len(scores) > 1 else 0,
        }
    return trends


class ResultAnalytics:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def list_results(self, user_id, page: int = 1, limit: int = 10, sort: str = "-created_at") -> Dict:
        if sort not in SORT_FIELDS:
            raise ValidationError("Invalid sort parameter")
        query = {"user_id": parse_object_id(user_id, "user ID")}
        field, direction = SORT_FIELDS[sort]

        cursor = self.db.final_results.find(query).sort(field, direction).skip((page - 1) * limit).limit(limit)
        results = [FinalResult(**data) for data in await cursor.to_list(length=limit)]
        total = await self.db.final_results.count_documents(query)
        return {"results": results, "pagination": pagination_meta(page, limit, total)}

    async def get_result_by_id(self, result_id, user_id) -> FinalResult:
        data = await self.db.final_results.find_one({
            "_id": parse_object_id(result_id, "result ID"),
            "user_id": parse_object_id(user_id, "user ID"),
        })
        if not data:
            raise NotFoundError("Result not found")
        return FinalResult(**data)

    async def performance_analytics(self, user_id) -> Dict:
        """Aggregate progress over every stored result, oldest first."""
        cursor = self.db.final_results.find({"user_id": parse_object_id(user_id, "user ID")}).sort("created_at", 1)
        results = [FinalResult(**data) for data in await cursor.to_list(length=None)]

        if not results:
            return {
                "total_interviews": 0,
                "average_score": 0,
                "best_score": 0,
                "improvement_trend": 0,
                "pass_rate": 0,
                "recent_results": [],
                "category_trends": {},
                "grade_distribution": {},
                "insights": {"most_improved_category": None, "strongest_category": None, "needs_improvement": []},
            }

        scores = [r.overall_score for r in results]
        trends = category_trends(results)
        return {
            "total_interviews": len(results),
            "average_score": round_score(average(scores)),
            "best_score": max(scores),
            "improvement_trend": improvement_trend(scores),
            "pass_rate": round_score(sum(1 for r in results if r.passed) * 100 / len(results)),
            "recent_results": results[-RECENT_RESULTS:],
            "category_trends": trends,
            "grade_distribution": dict(Counter(r.grade for r in results)),
            "insights": {
                "most_improved_category": max(trends, key=lambda c: trends[c]["trend"]) if trends else None,
                "strongest_category": max(trends, key=lambda c: trends[c]["average"]) if trends else None,
                "needs_improvement": [c for c, t in trends.items() if t["average"] < NEEDS_IMPROVEMENT_BELOW],
            },
        }

    async def compare_results(self, first_id, second_id, user_id) -> Dict:
        """How the second result differs from the first."""
        try:
            first = await self.get_result_by_id(first_id, user_id)
            second = await self.get_result_by_id(second_id, user_id)
        except NotFoundError:
            raise NotFoundError("One or both results not found")

        before = first.category_scores.model_dump()
        after = second.category_scores.model_dump()
        changes = {category: after[category] - before[category] for category in before}

        return {
            "result1": first,
            "result2": second,
            "comparison": {
                "overall_score_change": second.overall_score - first.overall_score,
                "category_changes": changes,
                "improvements": [c for c, delta in changes.items() if delta > 0],
                "declines": [c for c, delta in changes.items() if delta < 0],
                "time_difference": int((second.created_at - first.created_at).total_seconds()),
                "grade_change": first.grade != second.grade,
            },
        }
