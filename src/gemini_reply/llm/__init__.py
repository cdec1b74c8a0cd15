"""LLM integration module."""

from .gemini import GeminiReplyClient, TooManyRequestsError, parse_generate_response
from .throttle import RequestThrottle

__all__ = [
    "GeminiReplyClient",
    "TooManyRequestsError",
    "parse_generate_response",
    "RequestThrottle",
]
