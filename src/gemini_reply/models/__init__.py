"""Data models for Gemini Reply."""

from .request import GenerationConfig, SafetySetting, GenerateContentRequest
from .reply import Reply, ReplyKind

__all__ = [
    "GenerationConfig",
    "SafetySetting",
    "GenerateContentRequest",
    "Reply",
    "ReplyKind",
]
