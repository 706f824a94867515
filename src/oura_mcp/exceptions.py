"""Oura MCP custom exceptions.

Exception Design Principles:
1. Messages are short and name the failing category or operation
2. Upstream response bodies and raw exception payloads never go into a message
3. Split on who can act on the failure:
   - Recoverable by user reconfiguration outside session (ConfigurationError)
   - Recoverable by the caller fixing its arguments (ValidationError)
   - Possibly transient, retry the whole operation (AuthenticationError, UpstreamError)
"""


class OuraMCPError(Exception):
    """Base exception for all Oura MCP errors.

    Provides context and actionable suggestions beyond standard exceptions.
    """

    def __init__(
        self,
        message: str,  # the error message
        *,
        errors: list[str] = None,  # detailed list of errors (if available)
        suggestions: list[str] = None,  # remedial actions
        context: dict = None,  # additional detailed context
    ):
        """Initialize OuraMCPError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigurationError(OuraMCPError):
    """No usable credentials - fatal at startup.

    Raised when neither a personal access token nor a complete client
    id/secret pair was supplied, or when an operation needs a credential
    mode that is not active.
    """

    pass


class ValidationError(OuraMCPError):
    """Malformed or incomplete tool arguments.

    Always raised before any network call is made.
    """

    pass


class AuthenticationError(OuraMCPError):
    """OAuth token exchange or refresh failed.

    Reported as the failure of every request awaiting that exchange.
    Not retried automatically.
    """

    pass


class UpstreamError(OuraMCPError):
    """Upstream API returned a non-2xx status, or the request itself failed.

    Carries only the status code and reason text; the response body is
    never attached.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.reason = reason
