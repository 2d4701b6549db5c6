"""Authentication layer — interfaces and credential storage."""

from globalwinescore.auth.credentials import ConfigStore
from globalwinescore.auth.interfaces import AuthCredentials, AuthProvider

__all__ = ["AuthCredentials", "AuthProvider", "ConfigStore"]
