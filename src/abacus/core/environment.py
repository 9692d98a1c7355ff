"""Variable store for one evaluation run."""

from __future__ import annotations

from collections.abc import Iterator

from abacus.core.errors import UndefinedVariableError


class Environment:
    """Mapping of variable name to its last-assigned value.

    Created empty for each run and mutated only by assignments. Bindings are
    never removed during a run.
    """

    __slots__ = ("_values",)

    def __init__(self) -> None:
        self._values: dict[str, float] = {}

    def lookup(self, name: str) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise UndefinedVariableError(name) from None

    def assign(self, name: str, value: float) -> None:
        self._values[name] = value

    def snapshot(self) -> dict[str, float]:
        """Copy of the current bindings as a plain dict."""
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Environment({self._values!r})"
