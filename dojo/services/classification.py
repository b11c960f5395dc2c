"""
Grading marker extraction from teacher replies.

The teacher embeds literal [PASS] / [FAIL] markers in graded replies. This
module strips them and reports which were present; applying the effects is
the session controller's job.
"""

import re
from dataclasses import dataclass

from dojo.llm.prompts.teacher import FAIL_MARKER, PASS_MARKER

_FAIL_PATTERN = re.compile(r"\s*" + re.escape(FAIL_MARKER) + r"\s*")
_PASS_PATTERN = re.compile(r"\s*" + re.escape(PASS_MARKER) + r"\s*")


@dataclass(frozen=True)
class ClassificationResult:
    """Cleaned reply text plus the grades found in it.

    Both flags can be set for a malformed reply carrying both markers.
    """

    text: str
    passed: bool = False
    failed: bool = False

    @property
    def graded(self) -> bool:
        return self.passed or self.failed


def _strip_marker(text: str, pattern: re.Pattern) -> tuple[str, bool]:
    if pattern.search(text) is None:
        return text, False
    # Marker in the middle of a sentence collapses to one space
    cleaned = pattern.sub(" ", text).strip()
    return cleaned, True


def classify(raw_text: str) -> ClassificationResult:
    """
    Detect and strip grading markers.

    Markers are checked independently. Text without markers is returned
    unchanged.

    Args:
        raw_text: Teacher reply as received from the oracle

    Returns:
        ClassificationResult with cleaned text and pass/fail flags
    """
    text, failed = _strip_marker(raw_text, _FAIL_PATTERN)
    text, passed = _strip_marker(text, _PASS_PATTERN)
    return ClassificationResult(text=text, passed=passed, failed=failed)
