"""Annotation type token normalization.

Annotations spell a few C types with single-word tokens so the parameter
list stays splittable on whitespace. Each emitted artifact maps those tokens
to its own spelling; tokens not listed pass through unchanged (fixed-width
integers, entity aliases, plain C scalars).
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        "StringCharPtr": "const char*",
        "objectPtr": "void*",
        "voidPtr": "void*",
        "OutputStringViewPtr": "struct CAPIStringView*",
        "OutputStringBufferPtr": "struct CAPIStringBuffer*",
        "ComponentVersion": "struct ComponentVersion",
        "CAPIStringView": "struct CAPIStringView",
    }
)


@dataclass(frozen=True)
class TypeMap:
    name: str
    table: Mapping[str, str]

    @classmethod
    def derive(cls, name: str, overrides: Mapping[str, str] | None = None) -> "TypeMap":
        table = dict(CANONICAL)
        table.update(overrides or {})
        # Targets must be fixed points so normalization stays idempotent.
        for raw, target in table.items():
            again = table.get(target, target)
            if again != target:
                raise ValueError(f"type map {name!r}: {raw!r} -> {target!r} is not stable")
        return cls(name=name, table=MappingProxyType(table))

    def normalize(self, token: str) -> str:
        token = token.strip()
        return self.table.get(token, token)

    __call__ = normalize


# Header: function signatures and event arguments share one table.
HEADER_TYPES = TypeMap.derive("header")

# Documentation drops the C `struct` keyword and keeps record names verbatim.
DOCS_TYPES = TypeMap.derive(
    "docs",
    {
        "OutputStringViewPtr": "CAPIStringView*",
        "OutputStringBufferPtr": "CAPIStringBuffer*",
        "ComponentVersion": "ComponentVersion",
        "CAPIStringView": "CAPIStringView",
    },
)
