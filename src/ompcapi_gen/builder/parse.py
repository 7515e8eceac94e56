"""Parse `OMP_CAPI(Group_Name, Ret(Type name, ...))` annotation lines."""

from __future__ import annotations

import logging

from ..errors import AnnotationSyntaxError
from ..typemap import HEADER_TYPES, TypeMap
from .symbols import APIRecord, Parameter, SourceLocation

logger = logging.getLogger(__name__)

API_PREFIX = "OMP_CAPI("


def _balanced_group(text: str, start: int) -> int:
    """Return the index of the `)` closing the `(` at `start`, or -1."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    cur: list[str] = []
    for ch in text:
        if ch == "," and depth == 0:
            parts.append("".join(cur))
            cur = []
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        cur.append(ch)
    parts.append("".join(cur))
    return parts


def parse_parameter(token: str, *, type_map: TypeMap = HEADER_TYPES) -> Parameter | None:
    """Split `Type name` on the first whitespace run.

    Returns None when the token does not carry both a type and a name.
    """
    parts = token.strip().split(None, 1)
    if len(parts) < 2:
        return None
    raw_type, name = parts
    return Parameter(name=name.strip(), type=type_map.normalize(raw_type))


def parse_params(text: str, *, type_map: TypeMap = HEADER_TYPES) -> tuple[Parameter, ...]:
    params: list[Parameter] = []
    if not text.strip():
        return ()
    for token in _split_top_level(text):
        p = parse_parameter(token, type_map=type_map)
        if p is None:
            logger.debug("dropping malformed parameter %r", token)
            continue
        params.append(p)
    return tuple(params)


def render_params(params: tuple[Parameter, ...] | list[Parameter]) -> str:
    return ", ".join(f"{p.type} {p.name}" for p in params)


def parse_annotation_line(
    line: str,
    *,
    type_map: TypeMap = HEADER_TYPES,
    flat_names: bool = False,
    prefix: str = API_PREFIX,
    source: SourceLocation | None = None,
) -> APIRecord:
    """Parse one annotation line into an APIRecord.

    Only the first `_` separates the group from the name, so names may
    contain underscores. With `flat_names` the record name is the whole
    `Group_Name` symbol.

    Raises:
        AnnotationSyntaxError: when no group, name or return type can be
            extracted, or the parameter list parentheses are unbalanced.
    """
    path = source.path if source is not None else None
    lineno = source.lineno if source is not None else None

    def fail(msg: str) -> AnnotationSyntaxError:
        return AnnotationSyntaxError(msg, path=path, lineno=lineno)

    line = line.strip()
    if not line.startswith(prefix):
        raise fail(f"line does not start with {prefix!r}")
    content = line[len(prefix) :]

    full_name, sep, rest = content.partition(", ")
    if not sep:
        raise fail("missing ', ' after the function name")
    full_name = full_name.strip()
    group, sep, name = full_name.partition("_")
    if not sep or not group or not name:
        raise fail(f"function name {full_name!r} has no Group_ prefix")

    open_at = rest.find("(")
    if open_at < 0:
        raise fail("missing '(' after the return type")
    return_type = rest[:open_at].strip()
    if not return_type:
        raise fail("empty return type")

    close_at = _balanced_group(rest, open_at)
    if close_at < 0:
        raise fail("unbalanced parentheses in parameter list")

    params = parse_params(rest[open_at + 1 : close_at], type_map=type_map)
    return APIRecord(
        group=group,
        name=full_name if flat_names else name,
        return_type=type_map.normalize(return_type),
        params=params,
        symbol=full_name,
        source=source,
    )
