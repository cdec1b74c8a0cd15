"""Utility functions for Gemini Reply."""

from .jsonl import write_jsonl, append_transcript

__all__ = [
    "write_jsonl",
    "append_transcript",
]
