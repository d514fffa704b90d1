"""Case-insensitive request headers.

Decoded once from the ASGI scope's raw byte pairs. Repeated headers keep
every value, in order, so ``Accept-Encoding`` lines can be rejoined.
"""

from collections.abc import Iterable, Mapping


class Headers:
    """Immutable request headers keyed by lowercased name."""

    __slots__ = ("_values",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in raw:
            values.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._values: dict[str, tuple[str, ...]] = {k: tuple(v) for k, v in values.items()}

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, str] | Iterable[tuple[str, str]]) -> "Headers":
        """Build headers from text pairs (tests, non-ASGI callers)."""
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls((k.encode("latin-1"), v.encode("latin-1")) for k, v in items)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"

    def get(self, name: str, default: str | None = None) -> str | None:
        """First value of *name*, or *default*."""
        values = self._values.get(name.lower())
        return values[0] if values else default

    def get_list(self, name: str) -> list[str]:
        """Every value of *name*, in arrival order."""
        return list(self._values.get(name.lower(), ()))
