"""GlobalWineScore provider package."""

from globalwinescore.providers.globalwinescore.auth import TokenAuth
from globalwinescore.providers.globalwinescore.client import GlobalWineScoreClient

__all__ = ["GlobalWineScoreClient", "TokenAuth"]
