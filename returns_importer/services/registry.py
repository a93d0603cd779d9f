from __future__ import annotations

"""Call-scoped uniqueness registries (first-seen-wins).

One registry is created per table per engine run by the orchestrator and
passed explicitly to the row validators; nothing here is module state.
Only keys of accepted rows are registered.
"""

__all__ = [
    "UniquenessRegistry",
]


class UniquenessRegistry:
    """Sets of already-accepted values, one per key name (id, email, ...)."""

    def __init__(self, *keys: str) -> None:
        self._seen: dict[str, set[str]] = {key: set() for key in keys}

    def seen(self, key: str, value: str) -> bool:
        return value in self._seen[key]

    def register(self, **values: str) -> None:
        for key, value in values.items():
            self._seen[key].add(value)

    def values(self, key: str) -> frozenset[str]:
        return frozenset(self._seen[key])

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return max((len(s) for s in self._seen.values()), default=0)
