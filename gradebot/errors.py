"""
Error kinds raised by gradebot.

Every failure is fatal for the invocation; the kind tells the caller
whether rerunning the whole update can help.
"""
from enum import Enum
from typing import Iterable, Optional


class ErrorKind(str, Enum):
    CONFIG_MISSING = "config_missing"
    AUTH_FAILURE = "auth_failure"
    GATEWAY_FAILURE = "gateway_failure"
    SCHEMA_PRECONDITION = "schema_precondition"
    DECODE_FAILURE = "decode_failure"


class GradebotError(Exception):
    """Base class for all gradebot failures."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(GradebotError):
    """Configuration is absent or unusable; raised before any network call."""

    kind = ErrorKind.CONFIG_MISSING


class ConfigMissingError(ConfigError):
    """Required configuration fields are absent."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


class AuthError(GradebotError):
    """Service account credential is malformed or was rejected."""

    kind = ErrorKind.AUTH_FAILURE


class GatewayError(GradebotError):
    """The spreadsheet API answered with a non-success status."""

    kind = ErrorKind.GATEWAY_FAILURE

    RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body
        detail = f" (status {status})" if status is not None else ""
        super().__init__(f"{message}{detail}: {body}" if body else f"{message}{detail}")

    @property
    def retryable(self) -> bool:
        return self.status in self.RETRYABLE_STATUSES


class SchemaPreconditionError(GradebotError):
    """The sheet lacks structure the update relies on (e.g. the key header)."""

    kind = ErrorKind.SCHEMA_PRECONDITION


class DecodeError(GradebotError):
    """Test-result payload is not valid base64-encoded JSON."""

    kind = ErrorKind.DECODE_FAILURE
