"""GlobalWineScore token authentication.

:class:`TokenAuth` resolves the API token issued on globalwinescore.com and
turns it into the ``Authorization: Token <value>`` header the API expects.
"""

import os

from globalwinescore.auth.credentials import ConfigStore
from globalwinescore.auth.interfaces import AuthCredentials, AuthProvider
from globalwinescore.core.exceptions import AuthenticationRequiredError

ENV_API_TOKEN = "GLOBALWINESCORE_API_TOKEN"
CONFIG_KEY_API_TOKEN = "api_token"


class TokenAuth(AuthProvider):
    """Resolves the GlobalWineScore API token from multiple sources.

    Resolution order (first match wins):

    1. The value passed to the constructor.
    2. The ``GLOBALWINESCORE_API_TOKEN`` environment variable.
    3. The ``api_token`` key of the configuration store.

    The token is resolved again on every call, so a token saved while the
    process runs is picked up by the next query.
    """

    def __init__(
        self,
        api_token: str | None = None,
        store: ConfigStore | None = None,
    ):
        """Initialise the auth provider.

        Args:
            api_token: An explicit API token.  When provided, the
                environment and the configuration store are skipped.
            store: The configuration store to read the token from.
                Defaults to the user's config file.
        """
        self._api_token = api_token
        self._store = store or ConfigStore()

    # -------------------------
    # AuthProvider interface
    # -------------------------

    def get_credentials(self) -> AuthCredentials:
        """Return the ``Authorization`` header for the resolved token.

        Returns:
            An :class:`AuthCredentials` instance.

        Raises:
            AuthenticationRequiredError: If no token is configured in any
                source.
        """
        token = self._resolve()
        if token is None:
            raise AuthenticationRequiredError(
                "API token not configured. "
                "Run 'globalwinescore config set --api-token YOUR_TOKEN'."
            )
        return AuthCredentials(headers={"Authorization": f"Token {token}"})

    def is_authenticated(self) -> bool:
        """Return ``True`` if a token is available from any source."""
        return self._resolve() is not None

    # -------------------------
    # Helpers
    # -------------------------

    def _resolve(self) -> str | None:
        if self._api_token:
            return self._api_token
        token = os.getenv(ENV_API_TOKEN)
        if token:
            return token
        return self._store.get(CONFIG_KEY_API_TOKEN) or None

    def token(self) -> str | None:
        """Return the resolved token itself, or ``None``."""
        return self._resolve()

    def token_source(self) -> str:
        """Return a human-readable description of where the token came from.

        Used by the ``config show`` CLI command.

        Returns:
            ``"constructor argument"``, ``"environment variable"``, or the
            path to the configuration file.
        """
        if self._api_token:
            return "constructor argument"
        if os.getenv(ENV_API_TOKEN):
            return "environment variable"
        return str(self._store.path)
