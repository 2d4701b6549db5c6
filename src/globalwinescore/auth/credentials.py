"""Persistent storage for the CLI configuration.

The configuration lives in a single JSON file::

    ~/.config/globalwinescore/config.json

It currently holds the GlobalWineScore API token under ``api_token``.  The
file is written with permissions restricted to the owner (0o600).
"""

import json
from pathlib import Path

_CONFIG_DIR = Path.home() / ".config" / "globalwinescore"
_CONFIG_FILE = _CONFIG_DIR / "config.json"


class ConfigStore:
    """Key/value configuration backed by a JSON file.

    Reads never raise: a missing or unparsable file behaves as an empty
    configuration.

    Args:
        path: Path to the JSON file.  Defaults to
            ``~/.config/globalwinescore/config.json``.
    """

    def __init__(self, path: Path | None = None):
        self._path = path or _CONFIG_FILE

    @property
    def path(self) -> Path:
        """The path of the backing JSON file."""
        return self._path

    def load(self) -> dict[str, str]:
        """Return the whole configuration.

        Returns:
            The stored mapping, or an empty dictionary if the file does
            not exist or cannot be parsed.
        """
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> str | None:
        """Return a single configuration value, or ``None`` if absent."""
        return self.load().get(key)

    def set(self, key: str, value: str) -> None:
        """Persist a configuration value.

        Creates the config directory if it does not already exist and
        restricts file permissions to the owner only.

        Args:
            key: The configuration key (e.g. ``"api_token"``).
            value: The value to store.
        """
        data = self.load()
        data[key] = value
        self._write(data)

    def unset(self, key: str) -> bool:
        """Remove a configuration value.

        Returns:
            ``True`` if the key was present, ``False`` otherwise.
        """
        data = self.load()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def clear(self) -> bool:
        """Remove the configuration file.

        Returns:
            ``True`` if the file was deleted, ``False`` if it did not exist.
        """
        if self._path.exists():
            self._path.unlink()
            return True
        return False

    def _write(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        self._path.chmod(0o600)
