from typing import List, Optional

from interview_grader.models.answer import Answer
from interview_grader.models.interview import InterviewSession


def generate_questions_prompt(
    tech_stack: List[str],
    hardness_level: str,
    experience_level: str,
    number_of_questions: int,
) -> str:
    """
    Builds the prompt asking the model for a fresh set of interview questions.
    """
    stack = ", ".join(tech_stack)

    return f"""Generate {number_of_questions} interview questions for a {experience_level} level candidate.

## Requirements
- Technology Stack: {stack}
- Experience Level: {experience_level}
- Difficulty Level: {hardness_level}
- Number of Questions: {number_of_questions}

## Guidelines
1. Questions should be appropriate for {experience_level} level candidates.
2. Difficulty should be {hardness_level}.
3. Include relevant {stack} technologies.
4. Mix technical, problem-solving and behavioral questions.
5. Questions should be clear and specific.

## Output Format (JSON)
{{
    "questions": [
        {{
            "question_text": "Question text here",
            "question_number": 1,
            "category": "Technical",
            "expected_answer": "Brief expected answer or key points"
        }}
    ]
}}

Categories must be one of: "Technical", "Behavioral", "Problem Solving".
"""


def evaluate_answer_prompt(
    question_text: str,
    answer_text: str,
    expected_answer: Optional[str],
    tech_stack: List[str],
    experience_level: str,
) -> str:
    """
    Builds the prompt scoring one answer on the four evaluation criteria.
    """
    return f"""Evaluate this interview answer for a {experience_level} level candidate.

## Question
{question_text}

## Expected Answer
{expected_answer or "Not specified"}

## Candidate's Answer
{answer_text}

## Technology Context
{", ".join(tech_stack) or "General"}

## Criteria (score 0-100 each)
1. relevance - How well does the answer address the question?
2. completeness - How complete and thorough is the answer?
3. technicalAccuracy - How technically accurate is the answer?
4. communication - How well is the answer communicated?

Provide constructive feedback and suggestions for improvement.

## Output Format (JSON)
{{
    "relevance": 85,
    "completeness": 78,
    "technicalAccuracy": 82,
    "communication": 80,
    "overall": 81,
    "feedback": "What was good, what was missing",
    "suggestions": ["Suggestion 1", "Suggestion 2"]
}}
"""


def narrative_prompt(session: InterviewSession, answers: List[Answer], behavioral_summary: str) -> str:
    """
    Builds the prompt for the written part of the final report.

    Scores are already fixed by the time this runs; the model only writes text.
    """
    transcript = ""
    for answer in answers:
        transcript += (
            f"Q{answer.question_number}: {answer.question_text}\n"
            f"A{answer.question_number}: {answer.answer_text}\n"
            f"AI Score: {answer.ai_evaluation.overall_score}/100\n\n"
        )

    return f"""Write the feedback section of an interview evaluation report.

## Interview
- Tech Stack: {", ".join(session.tech_stack)}
- Experience Level: {session.experience_level}
- Difficulty: {session.hardness_level}
- Questions Answered: {len(answers)}/{len(session.questions)}

## Answers and Scores
{transcript}
## Behavioral Analysis
{behavioral_summary}

## Instructions
- Do NOT produce any numeric score; scoring is done separately.
- Be thorough, constructive and specific.

## Output Format (JSON)
{{
    "strengths": ["Strength 1", "Strength 2"],
    "weaknesses": ["Weakness 1", "Weakness 2"],
    "recommendations": ["Recommendation 1", "Recommendation 2"],
    "narrativeFeedback": "Overall feedback with actionable insights"
}}
"""
