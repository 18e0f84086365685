"""
StudyBot — Prompt Builders

Every LLM call goes through one of these. Each returns the messages list for
LLMProvider.generate.
"""

from typing import Optional

SYSTEM_PROMPT = (
    "You are StudyBot, a calm and encouraging maths tutor for high-school students "
    "chatting on a messaging app. Keep replies under 120 words, plain text, no markdown "
    "headings. Teach methods, never just hand over final homework answers."
)

REASON_TEXT = {
    "failed": "recently failed a test",
    "confused": "feels lost in class",
    "comparison": "feels behind compared to classmates",
    "comment": "was hurt by someone's comment about their ability",
    "other": "is feeling low about maths",
}


def _messages(user_prompt: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def support_prompt(name: Optional[str], reason: Optional[str], confidence: Optional[int]) -> list[dict]:
    situation = REASON_TEXT.get(reason or "other", REASON_TEXT["other"])
    return _messages(
        f"A student called {name or 'the student'} {situation} and rates their "
        f"confidence {confidence or 3}/5. Write two warm, specific sentences of "
        f"micro-support. No questions, no emojis beyond one."
    )


def method_prompt(subject: str, problem_type: str, confusion: str, example_number: int = 1) -> list[dict]:
    variation = "" if example_number <= 1 else f" Use a different worked example than before (example {example_number})."
    return _messages(
        f"Subject: {subject}. Problem type: {problem_type.replace('_', ' ')}. "
        f"The student says: \"{confusion}\". Explain the METHOD step by step with a "
        f"small worked example of your own. Do not solve their exact problem.{variation}"
    )


def lesson_prompt(subject: str, topic: str, focus: Optional[str], example_number: int = 1) -> list[dict]:
    focus_line = f" They are worried about: \"{focus}\"." if focus else ""
    return _messages(
        f"Exam revision for {subject}, topic {topic.replace('_', ' ')}.{focus_line} "
        f"Give one key rule and worked example #{example_number}, in at most 6 short lines."
    )


def explain_prompt(topic: str, grade: Optional[str]) -> list[dict]:
    return _messages(
        f"Explain \"{topic}\" to a grade {grade or '10'} student in simple steps with one "
        f"short example."
    )
