from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from ..errors import DuplicateSymbolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceLocation:
    path: str
    lineno: int

    def __str__(self) -> str:
        return f"{self.path}:{self.lineno}"


@dataclass(frozen=True)
class Parameter:
    name: str
    type: str


@dataclass(frozen=True)
class APIRecord:
    group: str
    name: str
    return_type: str
    params: tuple[Parameter, ...] = ()
    # exported symbol as written in the annotation; defaults to `Group_Name`
    symbol: str = ""
    source: SourceLocation | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.symbol:
            object.__setattr__(self, "symbol", f"{self.group}_{self.name}")

    @property
    def key(self) -> tuple[str, str]:
        return (self.group, self.name)


@dataclass(frozen=True)
class EventRecord:
    name: str
    args: tuple[Parameter, ...] = ()


class APISurface:
    """Annotated functions grouped by API group, in scan order.

    A record added under an existing `(group, name)` replaces the earlier one
    at the earlier one's position. With `strict=True` that raises instead.
    """

    def __init__(self, *, strict: bool = False):
        self.strict = strict
        self._groups: dict[str, dict[str, APIRecord]] = {}

    def add(self, record: APIRecord) -> None:
        group = self._groups.setdefault(record.group, {})
        existing = group.get(record.name)
        if existing is not None:
            msg = f"duplicate symbol {record.symbol}: {record.source} replaces {existing.source}"
            if self.strict:
                raise DuplicateSymbolError(msg)
            logger.warning(msg)
        group[record.name] = record

    def groups(self) -> list[str]:
        return list(self._groups)

    def records(self, group: str) -> list[APIRecord]:
        return list(self._groups.get(group, {}).values())

    def items(self) -> Iterator[tuple[str, list[APIRecord]]]:
        for group, by_name in self._groups.items():
            yield group, list(by_name.values())

    def get(self, group: str, name: str) -> APIRecord | None:
        return self._groups.get(group, {}).get(name)

    def __iter__(self) -> Iterator[APIRecord]:
        for by_name in self._groups.values():
            yield from by_name.values()

    def __len__(self) -> int:
        return sum(len(by_name) for by_name in self._groups.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        group, name = key
        return name in self._groups.get(group, {})


@dataclass(frozen=True)
class EventSchema:
    # component -> events, document order
    components: dict[str, tuple[EventRecord, ...]]

    def items(self) -> Iterator[tuple[str, tuple[EventRecord, ...]]]:
        return iter(self.components.items())

    def __len__(self) -> int:
        return sum(len(events) for events in self.components.values())
