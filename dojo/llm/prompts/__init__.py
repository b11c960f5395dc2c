"""Prompt templates for the teacher oracle."""

from .teacher import (
    FAIL_MARKER,
    PASS_MARKER,
    build_contextual_prompt,
    get_exam_prompt,
    get_hint_prompt,
    get_teacher_system_prompt,
    get_training_start_prompt,
)

__all__ = [
    "FAIL_MARKER",
    "PASS_MARKER",
    "build_contextual_prompt",
    "get_exam_prompt",
    "get_hint_prompt",
    "get_teacher_system_prompt",
    "get_training_start_prompt",
]
