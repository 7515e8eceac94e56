"""ctypes counterpart of the generated `omp_initialize_capi`.

Loads the C API shared library and binds every scanned record into a
per-group dispatch table, following the same contract as the header:
the sentinel symbol is mandatory, every other symbol is optional and is
left as None when the library does not export it.
"""

from __future__ import annotations

import ctypes
import logging
import os
from pathlib import Path
from typing import Any

from ..builder.symbols import APIRecord, APISurface
from ..errors import LoadError
from ..header import ENTITY_TYPES, LIBRARY_NAME, SENTINEL
from .platform import library_path

logger = logging.getLogger(__name__)


class ComponentVersion(ctypes.Structure):
    _fields_ = [
        ("major", ctypes.c_uint8),
        ("minor", ctypes.c_uint8),
        ("patch", ctypes.c_uint8),
        ("prerel", ctypes.c_uint16),
    ]


class CAPIStringView(ctypes.Structure):
    _fields_ = [("len", ctypes.c_uint), ("data", ctypes.c_char_p)]


class CAPIStringBuffer(ctypes.Structure):
    _fields_ = [
        ("capacity", ctypes.c_uint),
        ("len", ctypes.c_uint),
        ("data", ctypes.c_char_p),
    ]


_CTYPES: dict[str, Any] = {
    "void": None,
    "bool": ctypes.c_bool,
    "char": ctypes.c_char,
    "int": ctypes.c_int,
    "float": ctypes.c_float,
    "double": ctypes.c_double,
    "size_t": ctypes.c_size_t,
    "int8_t": ctypes.c_int8,
    "int16_t": ctypes.c_int16,
    "int32_t": ctypes.c_int32,
    "int64_t": ctypes.c_int64,
    "uint8_t": ctypes.c_uint8,
    "uint16_t": ctypes.c_uint16,
    "uint32_t": ctypes.c_uint32,
    "uint64_t": ctypes.c_uint64,
    "const char*": ctypes.c_char_p,
    "struct ComponentVersion": ComponentVersion,
    "struct CAPIStringView": CAPIStringView,
    "struct CAPIStringView*": ctypes.POINTER(CAPIStringView),
    "struct CAPIStringBuffer*": ctypes.POINTER(CAPIStringBuffer),
}


def ctype_for(c_type: str) -> Any:
    """Map a normalized C type spelling to its ctypes counterpart."""
    c_type = c_type.strip()
    if c_type in _CTYPES:
        return _CTYPES[c_type]
    if c_type.endswith("*") or c_type in ENTITY_TYPES:
        return ctypes.c_void_p
    raise LoadError(f"no ctypes mapping for C type {c_type!r}")


def resolve_symbol(lib: Any, name: str) -> Any | None:
    """Resolve `name` in `lib` by exact string; None when it is not exported."""
    try:
        return getattr(lib, name)
    except AttributeError:
        return None


def _load_library(path: Path) -> Any:
    if not path.exists():
        raise LoadError(f"shared library not found: {path}")
    try:
        if os.name == "nt":
            return ctypes.WinDLL(str(path))
        return ctypes.CDLL(str(path))
    except OSError as e:
        raise LoadError(str(e)) from e


def _bind(fn: Any, record: APIRecord) -> Any:
    fn.restype = ctype_for(record.return_type)
    fn.argtypes = [ctype_for(p.type) for p in record.params]
    return fn


class DispatchTable:
    """Function slots of one API group; unresolved slots hold None."""

    def __init__(self, group: str, slots: dict[str, Any]):
        self.group = group
        self._slots = slots

    def __getattr__(self, name: str) -> Any:
        try:
            return self.__dict__["_slots"][name]
        except KeyError:
            raise AttributeError(f"{self.__dict__.get('group')}_t has no field {name!r}") from None

    def __getitem__(self, name: str) -> Any:
        return self._slots[name]

    def __contains__(self, name: object) -> bool:
        return name in self._slots

    def names(self) -> list[str]:
        return list(self._slots)

    def missing(self) -> list[str]:
        return [name for name, fn in self._slots.items() if fn is None]


class CAPIClient:
    def __init__(
        self,
        surface: APISurface,
        path: Path | None = None,
        *,
        library_name: str = LIBRARY_NAME,
        sentinel: tuple[str, str] = SENTINEL,
    ):
        self._surface = surface
        self._path = Path(path) if path is not None else library_path(library_name)
        self._sentinel = sentinel
        self._tables: dict[str, DispatchTable] | None = None

    @property
    def initialized(self) -> bool:
        return self._tables is not None

    @property
    def tables(self) -> dict[str, DispatchTable]:
        if self._tables is None:
            raise LoadError("C API is not initialized")
        return self._tables

    def __getattr__(self, group: str) -> DispatchTable:
        tables = self.__dict__.get("_tables")
        if tables is None or group not in tables:
            raise AttributeError(group)
        return tables[group]

    def initialize(self) -> bool:
        """Open the library and fill the dispatch tables.

        Returns False, leaving no tables published, when the library cannot
        be opened or does not export the sentinel symbol. A slot whose C
        types have no ctypes mapping is left as None, like an absent symbol.
        """
        try:
            lib = _load_library(self._path)
        except LoadError as e:
            logger.warning("failed to open C API library %s: %s", self._path, e)
            return False

        sg, sn = self._sentinel
        sentinel_record = self._surface.get(sg, sn)
        sentinel_symbol = sentinel_record.symbol if sentinel_record is not None else f"{sg}_{sn}"
        sentinel_fn = resolve_symbol(lib, sentinel_symbol)
        if sentinel_fn is None:
            logger.warning("%s does not export %s; not a compatible C API library", self._path, sentinel_symbol)
            return False

        tables: dict[str, DispatchTable] = {}
        for group, records in self._surface.items():
            slots: dict[str, Any] = {}
            for r in records:
                fn = sentinel_fn if r.key == self._sentinel else resolve_symbol(lib, r.symbol)
                if fn is None:
                    logger.debug("optional symbol %s not exported", r.symbol)
                    slots[r.name] = None
                    continue
                try:
                    slots[r.name] = _bind(fn, r)
                except LoadError as e:
                    logger.warning("leaving %s unbound: %s", r.symbol, e)
                    slots[r.name] = None
            tables[group] = DispatchTable(group, slots)

        self._tables = tables
        return True
