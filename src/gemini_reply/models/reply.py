"""Reply result model."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ReplyKind(str, Enum):
    """Outcome of a reply request."""

    TEXT = "text"
    INVALID_INPUT = "invalid_input"
    EXHAUSTED = "exhausted"
    HTTP_ERROR = "http_error"
    SAFETY_BLOCKED = "safety_blocked"
    RECITATION_BLOCKED = "recitation_blocked"
    EMPTY_RESPONSE = "empty_response"
    QUOTA_EXCEEDED = "quota_exceeded"
    API_ERROR = "api_error"
    MALFORMED_RESPONSE = "malformed_response"
    UNKNOWN = "unknown"


# User-facing wording; changing any of these breaks callers matching on them.
MESSAGES = {
    ReplyKind.INVALID_INPUT: "Please provide a message.",
    ReplyKind.EXHAUSTED: "❌ Service temporarily unavailable. Please try again in a few minutes.",
    ReplyKind.HTTP_ERROR: "❌ API request failed: {detail}. Please try again in a few minutes.",
    ReplyKind.SAFETY_BLOCKED: "❌ I can't provide a response to that request due to safety guidelines.",
    ReplyKind.RECITATION_BLOCKED: "❌ I can't provide that response due to content policy.",
    ReplyKind.EMPTY_RESPONSE: "❌ Received empty response from AI. Please try again.",
    ReplyKind.QUOTA_EXCEEDED: "❌ Daily quota exceeded. Please try again tomorrow or check your API usage.",
    ReplyKind.API_ERROR: "❌ API Error: {detail}",
    ReplyKind.MALFORMED_RESPONSE: "❌ Unexpected response from AI. Please try again.",
    ReplyKind.UNKNOWN: "❌ Error: {detail}",
}


# Names shown for non-success statuses. Fixed here so the wording does not
# follow http.HTTPStatus phrases, which change between Python releases.
STATUS_NAMES = {
    300: "MultipleChoices",
    301: "MovedPermanently",
    302: "Found",
    303: "SeeOther",
    304: "NotModified",
    305: "UseProxy",
    307: "TemporaryRedirect",
    308: "PermanentRedirect",
    400: "BadRequest",
    401: "Unauthorized",
    402: "PaymentRequired",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    406: "NotAcceptable",
    407: "ProxyAuthenticationRequired",
    408: "RequestTimeout",
    409: "Conflict",
    410: "Gone",
    411: "LengthRequired",
    412: "PreconditionFailed",
    413: "RequestEntityTooLarge",
    414: "RequestUriTooLong",
    415: "UnsupportedMediaType",
    416: "RequestedRangeNotSatisfiable",
    417: "ExpectationFailed",
    421: "MisdirectedRequest",
    422: "UnprocessableEntity",
    423: "Locked",
    424: "FailedDependency",
    426: "UpgradeRequired",
    428: "PreconditionRequired",
    429: "TooManyRequests",
    431: "RequestHeaderFieldsTooLarge",
    451: "UnavailableForLegalReasons",
    500: "InternalServerError",
    501: "NotImplemented",
    502: "BadGateway",
    503: "ServiceUnavailable",
    504: "GatewayTimeout",
    505: "HttpVersionNotSupported",
    506: "VariantAlsoNegotiates",
    507: "InsufficientStorage",
    508: "LoopDetected",
    510: "NotExtended",
    511: "NetworkAuthenticationRequired",
}


def status_name(status_code: int) -> str:
    """Name an HTTP status the way it is shown to users, e.g. 503 -> ServiceUnavailable."""
    return STATUS_NAMES.get(status_code, str(status_code))


class Reply(BaseModel):
    """Result of a reply request: extracted text or a failure kind."""

    kind: ReplyKind = Field(..., description="Outcome kind")
    text: Optional[str] = Field(default=None, description="Extracted reply text")
    status_code: Optional[int] = Field(default=None, description="HTTP status for HTTP_ERROR")
    detail: Optional[str] = Field(default=None, description="Error message or details")

    @property
    def ok(self) -> bool:
        return self.kind == ReplyKind.TEXT

    @classmethod
    def of_text(cls, text: str) -> "Reply":
        return cls(kind=ReplyKind.TEXT, text=text)

    @classmethod
    def failure(cls, kind: ReplyKind, detail: Optional[str] = None) -> "Reply":
        return cls(kind=kind, detail=detail)

    @classmethod
    def http_error(cls, status_code: int) -> "Reply":
        return cls(
            kind=ReplyKind.HTTP_ERROR,
            status_code=status_code,
            detail=status_name(status_code),
        )

    def render(self) -> str:
        """Render the reply as the string handed back to callers."""
        if self.kind == ReplyKind.TEXT:
            return self.text or ""
        return MESSAGES[self.kind].format(detail=self.detail)
