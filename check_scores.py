#!/usr/bin/env python3
"""Check the scores stored for the latest interview."""

import asyncio
from interview_grader.database import Database


async def check_scores():
    """Print answers and the final result of the most recent interview."""
    await Database.connect()

    session = await Database.db.interview_sessions.find_one(
        {},
        sort=[("created_at", -1)]
    )

    if not session:
        print("❌ No interviews found")
        await Database.disconnect()
        return

    print(f"📝 Interview: {session['_id']}")
    print(f"   Status: {session.get('status')}")
    print(f"   Stack: {', '.join(session.get('tech_stack', []))}")
    print(f"   Questions: {len(session.get('questions', []))}")

    answers = await Database.db.answers.find(
        {"interview_id": session["_id"]}
    ).sort("question_number", 1).to_list(length=None)

    if answers:
        print(f"\n✅ Answers ({len(answers)}):")
        for answer in answers:
            evaluation = answer.get("ai_evaluation", {})
            print(f"   - Q{answer['question_number']} | Score: {evaluation.get('overall_score')}/100 "
                  f"({evaluation.get('source')})")
            if evaluation.get("reason"):
                print(f"     Quality gate: {evaluation['reason']}")
    else:
        print("\n❌ No answers found")

    result = await Database.db.final_results.find_one({"interview_id": session["_id"]})
    if result:
        print(f"\n🏁 Result: {result.get('overall_score')}/100, grade {result.get('grade')}, "
              f"{'passed' if result.get('passed') else 'failed'}")
        for name, value in result.get("category_scores", {}).items():
            print(f"   {name}: {value}")
        print(f"\n📄 Feedback: {result.get('detailed_feedback', '')[:100]}...")
    else:
        print("\n❌ No final result yet")

    await Database.disconnect()

if __name__ == "__main__":
    asyncio.run(check_scores())
