"""Label sets with a canonical ordering."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, NamedTuple

from ticketbridge.modules.alertticket.util.constants import AlertTicketConstant


class Pair(NamedTuple):
    name: str
    value: str


class LabelSet(Mapping):
    """Immutable name/value mapping iterated in canonical order.

    ``alertname`` always comes first, every other name follows sorted
    lexicographically. ``keys()``, ``values()`` and ``items()`` inherit that
    order, which keeps fingerprints and rendered templates reproducible no
    matter how the labels were inserted.
    """

    __slots__ = ("_data", "_order")

    def __init__(self, data: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        items: Dict[str, str] = dict(data or {})
        self._data = {str(name): "" if value is None else str(value) for name, value in items.items()}
        self._order = self._canonical_order(self._data)

    @classmethod
    def of(cls, data: Mapping[str, str] | None) -> "LabelSet":
        if isinstance(data, LabelSet):
            return data
        return cls(data)

    @staticmethod
    def _canonical_order(data: Mapping[str, str]) -> tuple[str, ...]:
        first = AlertTicketConstant.ALERT_NAME_LABEL
        rest = sorted(name for name in data if name != first)
        if first in data:
            return (first, *rest)
        return tuple(rest)

    def __getitem__(self, name: str) -> str:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._data)

    def __hash__(self) -> int:
        return hash(tuple(self.items()))

    def __repr__(self) -> str:
        return f"LabelSet({dict(self.items())!r})"

    def sorted_pairs(self) -> List[Pair]:
        return [Pair(name, self._data[name]) for name in self._order]

    def names(self) -> List[str]:
        return list(self._order)

    def remove(self, names: Iterable[str]) -> "LabelSet":
        dropped = set(names)
        return LabelSet({name: value for name, value in self._data.items() if name not in dropped})

    def to_dict(self) -> Dict[str, str]:
        return dict(self.items())
