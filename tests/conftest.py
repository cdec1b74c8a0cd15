"""Shared pytest fixtures for gemini-reply tests."""

import json
from pathlib import Path
from typing import Any, Callable, Union

import httpx
import pytest

from gemini_reply.config import LLMConfig, RetryConfig, RateLimiterConfig
from gemini_reply.llm.gemini import GeminiReplyClient


class FakeClock:
    """Manually advanced clock whose sleep just moves time forward."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingTransport:
    """Replays canned responses and records when each request started.

    Each item in ``responses`` is an ``httpx.Response`` to return or an
    exception to raise. The last item repeats once the list runs out.
    """

    def __init__(
        self,
        clock: FakeClock,
        responses: list[Union[httpx.Response, Exception]],
        latency: float = 0.5,
    ):
        self.clock = clock
        self.responses = responses
        self.latency = latency
        self.requests: list[httpx.Request] = []
        self.started_at: list[float] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.started_at.append(self.clock.now)
        self.clock.now += self.latency

        index = min(len(self.requests) - 1, len(self.responses) - 1)
        item = self.responses[index]
        if isinstance(item, Exception):
            raise item
        # Fresh response per request; httpx binds a response to its request
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=data)


def text_body(text: str) -> dict[str, Any]:
    """A generateContent body with one candidate holding ``text``."""
    return {"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]}


@pytest.fixture
def llm_config() -> LLMConfig:
    """LLM configuration with a dummy key."""
    return LLMConfig(api_key="test-key", model_name="gemini-1.5-flash")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_client(
    llm_config: LLMConfig, clock: FakeClock
) -> Callable[..., tuple[GeminiReplyClient, RecordingTransport]]:
    """Factory building a client wired to a recording mock transport."""

    def factory(*responses: Union[httpx.Response, Exception], latency: float = 0.5):
        transport = RecordingTransport(clock, list(responses), latency=latency)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(transport.handler))
        client = GeminiReplyClient(
            config=llm_config,
            retry_config=RetryConfig(),
            rate_limiter_config=RateLimiterConfig(),
            http_client=http_client,
            clock=clock,
            sleep=clock.sleep,
        )
        return client, transport

    return factory


@pytest.fixture
def safety_body() -> dict[str, Any]:
    return {
        "candidates": [
            {
                "finishReason": "SAFETY",
                "safetyRatings": [
                    {"category": "HARM_CATEGORY_HARASSMENT", "probability": "HIGH"}
                ],
            }
        ]
    }


@pytest.fixture
def quota_body() -> dict[str, Any]:
    return {"error": {"code": 429, "message": "quota exceeded for today", "status": "RESOURCE_EXHAUSTED"}}


def request_json(request: httpx.Request) -> dict[str, Any]:
    return json.loads(request.content)


def read_records(path: Path) -> list[dict[str, Any]]:
    """Load every non-blank line of a JSONL file."""
    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
