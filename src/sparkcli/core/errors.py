"""
Structured error system for sparkcli.

Every failure the client can report is a subclass of SparkError carrying a
stable ``kind`` string. Library code raises these; only the CLI decides to
terminate the process.
"""

from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class SparkError(Exception):
    """Base exception for all sparkcli errors."""

    kind = "spark-error"

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code or self.kind
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        parts = [self.message]
        if self.status:
            parts.append(f"(Status: {self.status})")
        return " ".join(parts)


class ConfigIOError(SparkError):
    """The configuration file could not be read or written."""

    kind = "config-io"

    def __init__(self, message: str = "Configuration file I/O failed", path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.details["path"] = path


class ConfigParseError(SparkError):
    """The configuration file is not valid TOML or holds ill-typed values."""

    kind = "config-parse"

    def __init__(self, message: str = "Invalid configuration file", path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.details["path"] = path


class MissingClientIdError(SparkError):
    kind = "missing-client-id"

    def __init__(self, message: str = "ClientId not configured", **kwargs):
        super().__init__(message, **kwargs)


class MissingClientSecretError(SparkError):
    kind = "missing-client-secret"

    def __init__(self, message: str = "ClientSecret not configured", **kwargs):
        super().__init__(message, **kwargs)


class MissingAuthCodeError(SparkError):
    kind = "missing-auth-code"

    def __init__(self, message: str = "AuthCode not configured", auth_url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if auth_url:
            self.details["auth_url"] = auth_url


class OAuthExchangeError(SparkError):
    """The token endpoint refused the exchange or returned an unusable body."""

    kind = "oauth-exchange-failed"

    def __init__(
        self,
        message: str = "OAuth token exchange failed",
        body: Optional[str] = None,
        grant_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.body = body
        if grant_type:
            self.details["grant_type"] = grant_type

    def __str__(self) -> str:
        text = super().__str__()
        if self.body:
            text = f"{text}: {self.body}"
        return text


class NotAuthenticatedError(SparkError):
    kind = "not-authenticated"

    def __init__(self, message: str = "No access token configured, run 'sparkcli login' first", **kwargs):
        super().__init__(message, **kwargs)


class TransportError(SparkError):
    """Network-level failure while executing a request."""

    kind = "transport-error"

    def __init__(self, message: str = "Network error", url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if url:
            self.details["url"] = url


class HttpError(SparkError):
    """Non-2xx response from the API. The body is kept verbatim."""

    kind = "http-error"

    def __init__(self, status: int, body: str = "", method: Optional[str] = None, url: Optional[str] = None, **kwargs):
        super().__init__(f"HTTP {status}", status=status, **kwargs)
        self.body = body
        if method:
            self.details["method"] = method
        if url:
            self.details["url"] = url

    def __str__(self) -> str:
        if self.body:
            return f"{self.message}: {self.body}"
        return self.message


class ValidationError(SparkError):
    """Invalid or missing argument, detected before any HTTP call."""

    kind = "validation"

    def __init__(self, message: str = "Invalid argument", field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if field:
            self.details["field"] = field


class NoDefaultRoomError(SparkError):
    kind = "no-default-room"

    def __init__(self, message: str = "No DefaultRoomId configured", **kwargs):
        super().__init__(message, **kwargs)


class ResponseDecodeError(SparkError):
    """A successful response carried a body that could not be decoded."""

    kind = "decode-error"

    def __init__(self, message: str = "Could not decode response body", **kwargs):
        super().__init__(message, **kwargs)


def create_user_friendly_message(error: SparkError) -> str:
    """
    Create a user-friendly error message.

    Args:
        error: The SparkError to convert

    Returns:
        User-friendly error message
    """
    if isinstance(error, MissingClientIdError):
        return "ClientId not configured. Add your integration's ClientId to sparkcli.toml."

    elif isinstance(error, MissingClientSecretError):
        return "ClientSecret not configured. Add your integration's ClientSecret to sparkcli.toml."

    elif isinstance(error, MissingAuthCodeError):
        return "AuthCode not configured. Visit the URL above and paste the code into sparkcli.toml as AuthCode."

    elif isinstance(error, NotAuthenticatedError):
        return "Not logged in. Run 'sparkcli login' first."

    elif isinstance(error, HttpError):
        if error.status == 401:
            return f"Authorization rejected ({error}). Your access token may have expired, run 'sparkcli login'."
        return f"Request failed with {error}"

    elif isinstance(error, TransportError):
        return f"Network error: {error.message}. Please check your connection and try again."

    elif isinstance(error, NoDefaultRoomError):
        return "No default room configured. Set one with 'sparkcli rooms default <id>'."

    else:
        return str(error)
