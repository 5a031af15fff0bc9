"""Human-readable grace period sentences."""

from __future__ import annotations

from collections.abc import MutableMapping


def _unit(amount: int, name: str) -> str:
    return f"{amount} {name}" if amount == 1 else f"{amount} {name}s"


class DurationFormatter:
    """Formats grace periods, memoizing per distinct number of seconds.

    The cache is injected so callers pick the retention policy: the default
    ``dict`` never evicts, a ``cachetools.LRUCache`` bounds it.
    """

    def __init__(self, cache: MutableMapping[int, str] | None = None) -> None:
        self.cache: MutableMapping[int, str] = cache if cache is not None else {}

    def format(self, seconds: int) -> str:
        """``0`` -> ``""``, ``65`` -> ``"1 minute and 5 seconds"``."""
        if seconds < 0:
            raise ValueError(f"Grace period must be >= 0, got {seconds}")
        result = self.cache.get(seconds)
        if result is None:
            result = self.cache[seconds] = self._compose(seconds)
        return result

    @staticmethod
    def _compose(seconds: int) -> str:
        minutes, rest = divmod(seconds, 60)
        parts = []
        if minutes:
            parts.append(_unit(minutes, "minute"))
        if rest:
            parts.append(_unit(rest, "second"))
        return " and ".join(parts)
