"""External service integrations."""

from .errors import (
    ErrorKind,
    MissingCredentialError,
    classify_error,
    should_request_credential,
    user_message,
)
from .gemini import GeminiClient
from .storage import LocalStore

__all__ = [
    "ErrorKind",
    "MissingCredentialError",
    "classify_error",
    "should_request_credential",
    "user_message",
    "GeminiClient",
    "LocalStore",
]
