"""Domain exceptions for the globalwinescore library.

The taxonomy is closed and flat: every failure of a score query surfaces as
exactly one of the subclasses below.  The library never retries and never
terminates the process; the caller decides how to present the error.
"""


class GlobalWineScoreError(Exception):
    """Base class for all globalwinescore library exceptions."""


class AuthenticationRequiredError(GlobalWineScoreError):
    """Raised when no API token is configured or the server rejects it.

    Detected locally before any request is sent when the token is missing,
    or reported by the server as HTTP 401.  The caller (CLI or application)
    is responsible for guiding the user through configuring a token.
    """


class RateLimitError(GlobalWineScoreError):
    """Raised when the server answers HTTP 429.

    The limit is enforced remotely; nothing is counted or waited for here.
    """


class PlanRestrictedError(GlobalWineScoreError):
    """Raised when the server answers HTTP 403.

    This is the normal outcome for the historical endpoint on a plan below
    the business tier.
    """


class RemoteRejectedError(GlobalWineScoreError):
    """Raised when the server rejects a request with a ``detail`` message."""

    def __init__(self, detail: str, status_code: int | None = None):
        """Initialise the error.

        Args:
            detail: The server's ``detail`` message, unmodified.
            status_code: The HTTP status code of the rejected response.
        """
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class TransportError(GlobalWineScoreError):
    """Raised for network failures, timeouts, and unusable responses."""
