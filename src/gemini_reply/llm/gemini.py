"""Gemini reply client over the generateContent REST endpoint."""

import asyncio
import logging
import re
import time
from typing import Any, Optional

import httpx

from ..config import Config, LLMConfig, RetryConfig, RateLimiterConfig
from ..models.reply import Reply, ReplyKind
from ..models.request import GenerationConfig, GenerateContentRequest
from .throttle import Clock, RequestThrottle, Sleep

logger = logging.getLogger(__name__)

_KEY_PARAM = re.compile(r"([?&]key=)[^&\s\"']+")


class RedactApiKeyFilter(logging.Filter):
    """Masks the ``key`` query parameter in log records.

    httpx logs every request URL at INFO, and the API key travels in the URL.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _KEY_PARAM.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


def install_key_redaction(logger_name: str = "httpx") -> None:
    """Attach the redaction filter to a logger once."""
    target = logging.getLogger(logger_name)
    if not any(isinstance(f, RedactApiKeyFilter) for f in target.filters):
        target.addFilter(RedactApiKeyFilter())


install_key_redaction()


class TooManyRequestsError(Exception):
    """The API answered 429; the attempt may be retried after a backoff."""

    def __init__(self, response: Optional[httpx.Response] = None):
        super().__init__("TooManyRequests")
        self.response = response


def parse_generate_response(data: Any) -> Reply:
    """Turn a decoded generateContent body into a Reply.

    Args:
        data: Decoded JSON body.

    Returns:
        Reply holding the first candidate's text, or the failure it reports.
    """
    if not isinstance(data, dict):
        return Reply.failure(ReplyKind.MALFORMED_RESPONSE)

    candidates = data.get("candidates")
    if isinstance(candidates, list) and candidates:
        candidate = candidates[0] if isinstance(candidates[0], dict) else {}

        finish_reason = candidate.get("finishReason")
        if finish_reason == "SAFETY":
            return Reply.failure(ReplyKind.SAFETY_BLOCKED)
        if finish_reason == "RECITATION":
            return Reply.failure(ReplyKind.RECITATION_BLOCKED)

        text = _first_part_text(candidate)
        if text and text.strip():
            return Reply.of_text(text)
        return Reply.failure(ReplyKind.EMPTY_RESPONSE)

    error = data.get("error")
    if error is not None:
        message = error.get("message") if isinstance(error, dict) else None
        if not isinstance(message, str):
            message = "Unknown error"

        if "quota" in message or "limit" in message:
            return Reply.failure(ReplyKind.QUOTA_EXCEEDED, message)
        return Reply.failure(ReplyKind.API_ERROR, message)

    return Reply.failure(ReplyKind.MALFORMED_RESPONSE)


def _first_part_text(candidate: dict[str, Any]) -> Optional[str]:
    content = candidate.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None


class GeminiReplyClient:
    """Client that turns user text into a single Gemini reply."""

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        rate_limiter_config: Optional[RateLimiterConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize Gemini reply client.

        Args:
            config: LLM configuration. Uses defaults if not provided.
            retry_config: Retry policy. Uses defaults if not provided.
            rate_limiter_config: Minimum request spacing.
            http_client: HTTP client to use. One is created (and owned) if omitted.
            clock: Monotonic clock used for request spacing.
            sleep: Coroutine used for every wait.
        """
        self.config = config or LLMConfig()

        if not self.config.api_key:
            raise ValueError("GOOGLE_API_KEY is required. Set it in .env or pass via config.")

        self.retry = retry_config or RetryConfig()
        self._throttle = RequestThrottle(rate_limiter_config, clock=clock, sleep=sleep)
        self._sleep = sleep
        self._generation_config = GenerationConfig.from_llm_config(self.config)

        self._http = http_client
        self._owns_http = http_client is None

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "GeminiReplyClient":
        """Build a client from the main configuration container."""
        return cls(
            config=config.llm,
            retry_config=config.retry,
            rate_limiter_config=config.rate_limiter,
            **kwargs,
        )

    @property
    def throttle(self) -> RequestThrottle:
        return self._throttle

    async def __aenter__(self) -> "GeminiReplyClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None

    async def get_reply(self, user_input: str) -> str:
        """Get a reply for the user's message.

        Never raises: every failure is rendered as a user-facing message.

        Args:
            user_input: The user's message.

        Returns:
            The model's text, or an error message.
        """
        reply = await self.get_reply_result(user_input)
        return reply.render()

    async def get_reply_result(self, user_input: str) -> Reply:
        """Get a reply for the user's message as a structured result.

        Args:
            user_input: The user's message.

        Returns:
            Reply describing the outcome.
        """
        try:
            if not isinstance(user_input, str) or not user_input.strip():
                return Reply.failure(ReplyKind.INVALID_INPUT)

            async with self._throttle.slot():
                return await self._request_with_retries(user_input)
        except Exception as e:
            logger.error(f"Reply request failed: {e}")
            return Reply.failure(ReplyKind.UNKNOWN, str(e))

    def get_reply_sync(self, user_input: str) -> str:
        """Synchronous wrapper for get_reply.

        Args:
            user_input: The user's message.

        Returns:
            The model's text, or an error message.
        """

        async def run() -> str:
            try:
                return await self.get_reply(user_input)
            finally:
                # An owned client cannot outlive the event loop it was used on
                await self.aclose()

        return asyncio.run(run())

    async def _request_with_retries(self, user_input: str) -> Reply:
        max_retries = self.retry.max_retries

        for attempt in range(max_retries + 1):
            try:
                reply = await self._request(user_input)
                self._throttle.mark_completed()
                return reply
            except TooManyRequestsError:
                if attempt < max_retries:
                    delay = self.retry.backoff_for(attempt)
                    logger.warning(
                        f"Rate limited (attempt {attempt + 1}), retrying in {delay:.0f}s"
                    )
                    await self._sleep(delay)
            except Exception as e:
                if attempt < max_retries:
                    logger.warning(
                        f"Gemini call failed (attempt {attempt + 1}): {e!r}, "
                        f"retrying in {self.retry.retry_delay:.0f}s"
                    )
                    await self._sleep(self.retry.retry_delay)

        logger.error(f"Gemini call failed after {max_retries + 1} attempts")
        return Reply.failure(ReplyKind.EXHAUSTED)

    async def _request(self, user_input: str) -> Reply:
        payload = GenerateContentRequest.from_text(
            user_input, self._generation_config
        ).to_payload()

        response = await asyncio.wait_for(
            self._get_http().post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=payload,
            ),
            timeout=self.config.timeout,
        )

        if response.status_code == httpx.codes.TOO_MANY_REQUESTS:
            raise TooManyRequestsError(response)

        if not response.is_success:
            logger.warning(f"Gemini returned HTTP {response.status_code}")
            return Reply.http_error(response.status_code)

        return parse_generate_response(response.json())

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self.config.timeout)
        return self._http
