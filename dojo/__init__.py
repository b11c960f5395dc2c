"""Dojo: a scored, life-limited training session with an LLM drill instructor."""

__version__ = "0.1.0"
