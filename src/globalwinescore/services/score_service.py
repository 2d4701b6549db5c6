"""Service layer that wraps a ScoreProvider with the common score queries."""

from dataclasses import replace

from globalwinescore.core.interfaces import ScoreProvider
from globalwinescore.core.models import Endpoint, ScoreFilter, ScorePage


class ScoreService:
    """Provides the named score queries on top of a single ``query`` call.

    Each method fixes the endpoint and fills in default filter values.
    Fields in the caller's ``filters`` override those defaults, except
    where a method forces a value.
    """

    def __init__(self, provider: ScoreProvider):
        """Initialise the service.

        Args:
            provider: A concrete implementation of :class:`ScoreProvider`.
        """
        self.provider = provider

    def latest(self, filters: ScoreFilter | None = None) -> ScorePage:
        """Return current scores matching ``filters``."""
        return self.provider.query(Endpoint.LATEST, filters or ScoreFilter())

    def historical(self, filters: ScoreFilter | None = None) -> ScorePage:
        """Return the full score history matching ``filters``.

        Requires the business plan; other plans get
        :class:`~globalwinescore.core.exceptions.PlanRestrictedError`.
        """
        return self.provider.query(
            Endpoint.HISTORICAL, filters or ScoreFilter()
        )

    def search(self, filters: ScoreFilter | None = None) -> ScorePage:
        """Return the best current scores matching ``filters``.

        The API has no free-text search, so this is the latest endpoint
        with best-first defaults (20 results, ordered by ``-score``).
        """
        filters = (filters or ScoreFilter()).with_defaults(
            limit=20, ordering="-score"
        )
        return self.latest(filters)

    def by_vintage(
        self, vintage: str, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Return current scores for one vintage, best first.

        Args:
            vintage: A four-digit year or ``"NV"``.
            filters: Caller overrides.  Defaults are ``limit=50`` and
                ``ordering="-score"``.

        Returns:
            A :class:`ScorePage`.
        """
        filters = (filters or ScoreFilter()).with_defaults(
            vintage=vintage, limit=50, ordering="-score"
        )
        return self.latest(filters)

    def by_color(
        self, color: str, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Return current scores for one wine colour, best first.

        Args:
            color: ``red``, ``white`` or ``pink`` in any case.
            filters: Caller overrides.  Defaults are ``limit=50`` and
                ``ordering="-score"``.

        Returns:
            A :class:`ScorePage`.
        """
        filters = (filters or ScoreFilter()).with_defaults(
            color=color.lower(), limit=50, ordering="-score"
        )
        return self.latest(filters)

    def by_wine_id(
        self, wine_id: str, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Return current scores for one wine."""
        return self.latest(
            (filters or ScoreFilter()).with_defaults(wine_id=wine_id)
        )

    def by_lwin(
        self, lwin: str, filters: ScoreFilter | None = None
    ) -> ScorePage:
        """Return current scores for one L-WIN identifier."""
        return self.latest((filters or ScoreFilter()).with_defaults(lwin=lwin))

    def top_rated(self, filters: ScoreFilter | None = None) -> ScorePage:
        """Return the highest-scored current wines.

        Ordering is always ``-score``; any ordering in ``filters`` is
        ignored.  ``limit`` defaults to 20.
        """
        filters = (filters or ScoreFilter()).with_defaults(limit=20)
        return self.latest(replace(filters, ordering="-score"))
