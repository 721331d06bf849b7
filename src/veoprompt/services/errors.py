"""Classification of remote generation failures into user-facing messages."""

import re
from enum import Enum

# Matched case-insensitively against the remote error text. Credential
# markers win over quota markers. Status codes only match as whole words.
INVALID_CREDENTIAL_MARKERS = re.compile(r"api key|api_key_invalid|permission_denied|\b400\b")
QUOTA_MARKERS = re.compile(r"quota|resource_exhausted|\b429\b")

INVALID_CREDENTIAL_CODES = (400, 401, 403)
QUOTA_CODES = (429,)


class ErrorKind(str, Enum):
    """Failure taxonomy for generation calls."""
    INVALID_CREDENTIAL = "invalid_credential"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNKNOWN = "unknown"


class MissingCredentialError(RuntimeError):
    """Raised before any remote call when no API key is configured."""

    def __init__(self) -> None:
        super().__init__(
            "API Key is not configured. Please set your API key in the application."
        )


_MESSAGES = {
    ErrorKind.INVALID_CREDENTIAL: "API Key không hợp lệ hoặc đã hết hạn. Vui lòng kiểm tra lại.",
    ErrorKind.QUOTA_EXCEEDED: "Bạn đã vượt quá hạn mức sử dụng API. Vui lòng thử lại sau.",
    ErrorKind.UNKNOWN: "Đã xảy ra lỗi. Vui lòng kiểm tra console và thử lại.",
}


def classify_error(exc: BaseException) -> ErrorKind:
    """Map an exception from the remote API onto an ``ErrorKind``.

    Uses the HTTP status code when the SDK error carries one, then falls back
    to markers in the error text. Anything unrecognised is UNKNOWN.
    """
    if isinstance(exc, MissingCredentialError):
        return ErrorKind.INVALID_CREDENTIAL

    code = getattr(exc, "code", None)
    if isinstance(code, int):
        if code in INVALID_CREDENTIAL_CODES:
            return ErrorKind.INVALID_CREDENTIAL
        if code in QUOTA_CODES:
            return ErrorKind.QUOTA_EXCEEDED

    text = str(exc).lower()
    if INVALID_CREDENTIAL_MARKERS.search(text):
        return ErrorKind.INVALID_CREDENTIAL
    if QUOTA_MARKERS.search(text):
        return ErrorKind.QUOTA_EXCEEDED
    return ErrorKind.UNKNOWN


def user_message(kind: ErrorKind) -> str:
    """Localized message shown to the user for a failure kind."""
    return _MESSAGES[kind]


def should_request_credential(kind: ErrorKind) -> bool:
    """Whether the failure means the user must enter a new API key."""
    return kind == ErrorKind.INVALID_CREDENTIAL
