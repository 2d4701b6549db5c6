"""Data model shared between the provider, the service, and the CLI."""

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, TypedDict

_VINTAGE_RE = re.compile(r"[0-9]{4}|NV")

_BOOL_PARAMS = {"true": True, "false": False}


# ----------------------
# Enumerations
# ----------------------


class Endpoint(str, Enum):
    """The two score resources exposed by the GlobalWineScore API."""

    LATEST = "latest"
    """Current scores, available on every plan."""

    HISTORICAL = "historical"
    """Full score history, gated to the business plan."""


class WineColor(str, Enum):
    """Wine colours accepted by the ``color`` filter."""

    red = "red"
    white = "white"
    pink = "pink"


# ----------------------
# ScoreFilter
# ----------------------


@dataclass(frozen=True)
class ScoreFilter:
    """Optional fields narrowing a score query.

    Fields are declared in the order they are transmitted.  A field left
    as ``None`` is never sent; the API treats an omitted parameter
    differently from an empty one.
    """

    wine_id: str | None = None
    vintage: str | None = None
    """Four-digit year or ``"NV"``."""

    color: str | None = None
    """One of :class:`WineColor` values."""

    is_primeurs: bool | None = None
    """Restrict to en-primeur scores.  ``False`` is sent explicitly."""

    lwin: str | None = None
    lwin_11: str | None = None
    limit: int | None = None
    offset: int | None = None
    ordering: str | None = None
    """Field name, prefixed with ``-`` for descending (e.g. ``"-score"``)."""

    def __post_init__(self):
        if self.vintage is not None and not (
            isinstance(self.vintage, str) and _VINTAGE_RE.fullmatch(self.vintage)
        ):
            raise ValueError(
                f"Invalid vintage {self.vintage!r}: expected a 4-digit year or 'NV'."
            )
        if self.color is not None and self.color not in {c.value for c in WineColor}:
            valid = ", ".join(c.value for c in WineColor)
            raise ValueError(
                f"Invalid color {self.color!r}: must be one of {valid}."
            )
        if self.is_primeurs is not None and not isinstance(self.is_primeurs, bool):
            raise ValueError("is_primeurs must be a boolean.")
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be a positive integer.")
        if self.offset is not None and self.offset < 0:
            raise ValueError("offset must be a non-negative integer.")

    def to_params(self) -> dict[str, Any]:
        """Return the query parameters for this filter.

        Booleans are rendered as ``"true"``/``"false"`` because ``requests``
        has no typed query values and would otherwise send ``"True"``.

        Returns:
            An ordered mapping containing only the fields that are set.
        """
        params: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[f.name] = value
        return params

    @classmethod
    def from_params(cls, params: dict[str, Any]) -> "ScoreFilter":
        """Rebuild a filter from query parameters.

        Unknown keys are ignored.

        Args:
            params: A mapping as produced by :meth:`to_params` or parsed
                from a query string.

        Returns:
            A :class:`ScoreFilter` equivalent to the one that produced
            ``params``.

        Raises:
            ValueError: If a value cannot be parsed back to its field type.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for name, value in params.items():
            if name not in known or value is None:
                continue
            if name == "is_primeurs" and not isinstance(value, bool):
                try:
                    value = _BOOL_PARAMS[str(value).lower()]
                except KeyError:
                    raise ValueError(
                        f"Invalid is_primeurs value {value!r}."
                    ) from None
            elif name in ("limit", "offset"):
                value = int(value)
            else:
                value = str(value)
            values[name] = value
        return cls(**values)

    def with_defaults(self, **defaults: Any) -> "ScoreFilter":
        """Return a copy where unset fields take the given defaults.

        Fields the caller set explicitly (including ``False``) are kept.

        Args:
            **defaults: Field names mapped to default values.

        Returns:
            A new :class:`ScoreFilter`.
        """
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        for name, value in defaults.items():
            if name not in current:
                raise TypeError(f"Unknown filter field {name!r}.")
            if current[name] is None:
                current[name] = value
        return ScoreFilter(**current)


# ----------------------
# WineScore
# ----------------------


class WineScore(TypedDict, total=False):
    """One rated wine as returned by the API.

    Every key is optional: the remote schema is not guaranteed and the
    client passes results through untouched.
    """

    wine_id: Any
    wine_name: str
    wine: str
    """Older responses carry the name under this key."""

    vintage: str
    score: float
    confidence_index: Any
    appellation: str
    color: str
    lwin: str
    lwin_11: str
    is_primeurs: bool
    date: str


# ----------------------
# ScorePage
# ----------------------


@dataclass
class ScorePage:
    """A page of results in the API's pagination envelope."""

    count: int
    """Total number of matches across all pages."""

    next: str | None = None
    """Opaque URL of the next page, or ``None``."""

    previous: str | None = None
    """Opaque URL of the previous page, or ``None``."""

    results: list[WineScore] = field(default_factory=list)
    """Scores in server order, exactly as returned."""

    @classmethod
    def from_json(cls, body: Any) -> "ScorePage":
        """Build a page from a decoded response body.

        Args:
            body: The decoded JSON envelope.

        Returns:
            A :class:`ScorePage` whose ``results`` are the server's own
            objects.

        Raises:
            ValueError: If ``body`` is not a pagination envelope.
        """
        if not isinstance(body, dict):
            raise ValueError("Response body is not a JSON object.")
        results = body.get("results")
        if not isinstance(results, list):
            raise ValueError("Response body has no 'results' list.")
        if not all(isinstance(item, dict) for item in results):
            raise ValueError("Response 'results' contains a non-object item.")
        count = body.get("count")
        if count is None:
            count = len(results)
        elif isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"Invalid 'count' in response: {count!r}.")
        return cls(
            count=count,
            next=body.get("next"),
            previous=body.get("previous"),
            results=results,
        )

    @property
    def has_more(self) -> bool:
        """``True`` when the server holds more matches than this page."""
        return self.count > len(self.results)

    def to_dict(self) -> dict[str, Any]:
        """Return the page as the API's envelope dictionary."""
        return {
            "count": self.count,
            "next": self.next,
            "previous": self.previous,
            "results": self.results,
        }
