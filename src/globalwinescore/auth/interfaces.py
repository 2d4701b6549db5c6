"""Abstract interfaces for the authentication layer.

This module defines the contract that any authentication strategy must
implement.  It is free of GlobalWineScore-specific details so that the
provider never needs to know where a token comes from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class AuthCredentials:
    """Generic carrier for HTTP authentication material.

    Attributes:
        headers: HTTP headers to add to requests (e.g. ``Authorization``).
    """

    headers: dict[str, str] = field(default_factory=dict)


class AuthProvider(ABC):
    """Abstract base class for authentication strategies.

    Example usage::

        auth = TokenAuth()                        # concrete implementation
        provider = GlobalWineScoreClient(auth)    # injected into provider
        service = ScoreService(provider)          # provider injected into service
    """

    @abstractmethod
    def get_credentials(self) -> AuthCredentials:
        """Return the current credentials.

        Returns:
            An :class:`AuthCredentials` instance ready to be applied to a
            request.

        Raises:
            AuthenticationRequiredError: If no credentials are available.
        """

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Return ``True`` if credentials are currently available.

        This method must not raise; it should silently return ``False``
        when credentials are absent.

        Returns:
            ``True`` if :meth:`get_credentials` would succeed.
        """
