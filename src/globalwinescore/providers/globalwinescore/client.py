"""GlobalWineScore provider using the public REST API."""

import logging

import requests

from globalwinescore.auth.interfaces import AuthProvider
from globalwinescore.core.exceptions import (
    AuthenticationRequiredError,
    GlobalWineScoreError,
    PlanRestrictedError,
    RateLimitError,
    RemoteRejectedError,
    TransportError,
)
from globalwinescore.core.interfaces import ScoreProvider
from globalwinescore.core.models import Endpoint, ScoreFilter, ScorePage

logger = logging.getLogger(__name__)


class GlobalWineScoreClient(ScoreProvider):
    """Provider for the GlobalWineScore API (``api.globalwinescore.com``).

    Each call to :meth:`query` resolves the token through the injected
    :class:`~globalwinescore.auth.interfaces.AuthProvider`, sends exactly
    one GET request, and either returns the page or raises one classified
    exception.  Nothing is retried or cached, and no cursor is retained
    between calls.
    """

    BASE_URL = "https://api.globalwinescore.com"

    ENDPOINT_PATHS: dict[Endpoint, str] = {
        Endpoint.LATEST: "/globalwinescores/latest/",
        Endpoint.HISTORICAL: "/globalwinescores/",
    }

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        auth: AuthProvider,
        session: requests.Session | None = None,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialise the client.

        Args:
            auth: The :class:`~globalwinescore.auth.interfaces.AuthProvider`
                that supplies the ``Authorization`` header.
            session: An optional :class:`requests.Session` used as the HTTP
                transport.  A new session is created when omitted.
            base_url: Override for :attr:`BASE_URL`.
            user_agent: Optional User-Agent header value.
            timeout: Seconds before requests gives up on the server.
        """
        self._auth = auth
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if user_agent:
            self.session.headers.update({"User-Agent": user_agent})

    def url_for(self, endpoint: Endpoint) -> str:
        """Return the absolute URL of a score endpoint."""
        return f"{self.base_url}{self.ENDPOINT_PATHS[Endpoint(endpoint)]}"

    def query(
        self, endpoint: Endpoint, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Run one score query against the API.

        Args:
            endpoint: :attr:`Endpoint.LATEST` or :attr:`Endpoint.HISTORICAL`.
            filters: Optional filter; only its set fields are sent.

        Returns:
            The response envelope as a :class:`ScorePage`, results
            untouched and in server order.

        Raises:
            AuthenticationRequiredError: If no token is configured (raised
                before any request is sent) or the server answers 401.
            RateLimitError: If the server answers 429.
            PlanRestrictedError: If the server answers 403.
            RemoteRejectedError: If the server answers with a ``detail``
                message.
            TransportError: On network errors, timeouts, unexpected status
                codes without ``detail``, or a malformed body.
        """
        credentials = self._auth.get_credentials()
        url = self.url_for(endpoint)
        params = (filters or ScoreFilter()).to_params()
        headers = {**credentials.headers, "Accept": "application/json"}

        logger.debug("GET %s params=%s", url, params)
        try:
            r = self.session.get(
                url, headers=headers, params=params, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.debug("Request to %s failed: %s", url, e)
            raise TransportError(f"Request failed: {e}") from e

        if not 200 <= r.status_code < 300:
            error = classify_failure(r)
            logger.warning(
                "GET %s answered %s (%s)", url, r.status_code, type(error).__name__
            )
            raise error

        try:
            page = ScorePage.from_json(r.json())
        except ValueError as e:
            raise TransportError(f"Malformed response: {e}") from e
        logger.debug("Received %d of %d results", len(page.results), page.count)
        return page


def classify_failure(response: requests.Response) -> GlobalWineScoreError:
    """Map a non-2xx response to exactly one domain exception.

    Checks run in a fixed order and the first match wins, so a 403 that
    also carries a ``detail`` message is still a plan restriction.

    Args:
        response: The failed HTTP response.

    Returns:
        The exception to raise.  The body is only read when no status rule
        matches.
    """
    status = response.status_code
    if status == 401:
        return AuthenticationRequiredError(
            "Authentication failed. Check your API token."
        )
    if status == 429:
        return RateLimitError(
            "Rate limit exceeded. Maximum 10 requests per minute."
        )
    if status == 403:
        return PlanRestrictedError(
            "Access forbidden. This endpoint may require a business plan."
        )

    detail = _detail(response)
    if detail:
        return RemoteRejectedError(detail, status_code=status)

    reason = f" {response.reason}" if response.reason else ""
    return TransportError(f"Request failed: HTTP {status}{reason}")


def _detail(response: requests.Response):
    """Return the body's ``detail`` message, or ``None`` if there is none."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("detail"):
        return body["detail"]
    return None
