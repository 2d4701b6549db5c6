"""Abstract interface for wine score providers."""

from abc import ABC, abstractmethod

from globalwinescore.core.models import Endpoint, ScoreFilter, ScorePage


class ScoreProvider(ABC):
    """Abstract base class for wine score API providers.

    The service layer and the CLI depend exclusively on this abstraction,
    never on a specific provider implementation.
    """

    @abstractmethod
    def query(
        self, endpoint: Endpoint, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Run one score query and return a single page of results.

        Args:
            endpoint: Which score resource to query.
            filters: Optional filter narrowing the query.  ``None`` behaves
                like an empty :class:`ScoreFilter`.

        Returns:
            A :class:`ScorePage` exactly as returned by the remote service.

        Raises:
            AuthenticationRequiredError: If no token is available or the
                server rejects it.
            RateLimitError: If the server's rate limit was exceeded.
            PlanRestrictedError: If the plan does not cover ``endpoint``.
            RemoteRejectedError: If the server rejected the request with a
                ``detail`` message.
            TransportError: For any other failure.
        """
