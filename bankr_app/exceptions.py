#  Bankr App Kit - Custom Exceptions
#
#  Typed exception hierarchy so callers (trading loop, CLI) can tell a
#  recoverable rate-limit rejection from an upstream or setup failure
#  without pattern-matching on message strings.
#
#  Depends on: (none)
#  Used by:    services/*, scaffold/*, cli.py

class BankrAppError(Exception):
    """Base exception for all Bankr App Kit errors."""


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class GatewayError(BankrAppError):
    """Base for errors raised by the agent request gateway."""


class RateLimitExceeded(GatewayError):
    """Admission denied: the rolling window is already full."""

    def __init__(self, limit: int, window_ms: int, retry_after_ms: int):
        self.limit = limit
        self.window_ms = window_ms
        self.retry_after_ms = retry_after_ms
        super().__init__(
            f"Rate limit exceeded ({limit} requests per {window_ms} ms). "
            f"Retry in {retry_after_ms} ms."
        )


class UpstreamRequestFailed(GatewayError):
    """The agent endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"API request failed: {status_code} {reason}".rstrip())


class UpstreamUnavailable(GatewayError):
    """The request never produced a response (connect error, timeout)."""


class MalformedUpstreamResponse(GatewayError):
    """2xx response whose body lacks choices[0].message.content."""


class ConnectivityCheckFailed(GatewayError):
    """Startup probe did not reach the agent or got an unexpected answer."""


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

class ResponseParseError(BankrAppError):
    """A value could not be extracted from free-text agent output."""


class TradeValidationError(BankrAppError):
    """Order rejected locally before any request was made."""


# ---------------------------------------------------------------------------
# Scaffolding
# ---------------------------------------------------------------------------

class ScaffoldError(BankrAppError):
    """Base for project generation failures."""


class InvalidProjectNameError(ScaffoldError):
    """Project name is empty or contains unsupported characters."""


class TemplateNotFoundError(ScaffoldError):
    """No template directory exists for the requested kind."""


class ProjectExistsError(ScaffoldError):
    """Target directory already exists and is not empty."""


class GitInitError(ScaffoldError):
    """git init/add/commit failed in the generated project."""
