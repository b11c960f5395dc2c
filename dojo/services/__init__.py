"""Application services: the session state machine and its collaborators."""

from dojo.services.classification import ClassificationResult, classify
from dojo.services.oracle import LLMTeacherOracle
from dojo.services.session_controller import SessionController

__all__ = ["ClassificationResult", "classify", "LLMTeacherOracle", "SessionController"]
