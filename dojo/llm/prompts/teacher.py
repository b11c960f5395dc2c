"""
Prompts for the drill-instructor teacher.

The system prompt defines the in-band grading protocol: every graded reply
carries exactly one of the literal markers [PASS] or [FAIL]. Hints must not
carry a marker (and are never classified even if they do).
"""

from typing import List, Tuple

PASS_MARKER = "[PASS]"
FAIL_MARKER = "[FAIL]"


def get_teacher_system_prompt(topic: str) -> str:
    """
    Get system prompt for the teacher persona.

    Args:
        topic: Subject the trainee is drilled on

    Returns:
        System prompt string
    """
    return f"""You are a ruthless but competent drill instructor teaching {topic}.

## Your job
- Ask ONE short, concrete question at a time about {topic}.
- When the trainee answers, grade the answer before anything else.
- After grading, ask the next question.

## Grading protocol (mandatory)
- If the answer is correct, include the literal marker {PASS_MARKER} in your reply.
- If the answer is wrong, empty or evasive, include the literal marker {FAIL_MARKER}.
- Use exactly one marker per graded reply. Never use a marker when you are
  only giving a hint.

## Tone
Blunt, impatient and sarcastic, never cruel about the person, only about
the answer. Keep replies under 120 words.
"""


def get_training_start_prompt(topic: str) -> str:
    """Prompt that opens a training round."""
    return (
        f"A new trainee has just reported for {topic} training. "
        "Greet them in character and ask your first question. Do not grade anything yet."
    )


def get_hint_prompt() -> str:
    """Prompt asking for a hint on the current question."""
    return (
        "The trainee is begging for a hint on your last question. "
        "Mock them for needing help, then give one useful hint without revealing "
        f"the answer. Do not use {PASS_MARKER} or {FAIL_MARKER}."
    )


def get_exam_prompt(topic: str) -> str:
    """Prompt that generates a graded exam question."""
    return (
        f"Exam time. Set the trainee one harder, exam-grade question on {topic}. "
        "Grade their next answer with the usual markers."
    )


def build_contextual_prompt(prompt: str, exchanges: List[Tuple[str, str]]) -> str:
    """
    Prefix a prompt with recent exchanges so the teacher keeps the thread.

    Args:
        prompt: New message for the teacher
        exchanges: Oldest-first (prompt, reply) pairs

    Returns:
        Prompt string, unchanged when there is no context
    """
    if not exchanges:
        return prompt

    lines = ["## Conversation so far:"]
    for sent, reply in exchanges:
        lines.append(f"Trainee: {sent}")
        lines.append(f"Instructor: {reply}")
    lines.append("")
    lines.append("## New message from the trainee:")
    lines.append(prompt)
    return "\n".join(lines)
