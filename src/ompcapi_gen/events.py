"""Event schema loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .builder.symbols import EventRecord, EventSchema, Parameter
from .errors import EventSchemaError
from .typemap import HEADER_TYPES, TypeMap


def _parse_arg(component: str, event: str, obj: Any) -> Parameter:
    if not isinstance(obj, dict):
        raise EventSchemaError(f"{component}.{event}: argument must be an object")
    name = obj.get("name")
    ty = obj.get("type")
    if not (isinstance(name, str) and name and isinstance(ty, str) and ty):
        raise EventSchemaError(f"{component}.{event}: argument needs non-empty 'name' and 'type'")
    return Parameter(name=name, type=ty)


def parse_event_schema(obj: Any, *, type_map: TypeMap = HEADER_TYPES) -> EventSchema:
    """Validate a decoded `{component: [{name, args: [{name, type}]}]}` document."""
    if not isinstance(obj, dict):
        raise EventSchemaError("event schema must be a JSON object keyed by component")

    components: dict[str, tuple[EventRecord, ...]] = {}
    for component, events in obj.items():
        if not isinstance(events, list):
            raise EventSchemaError(f"{component}: expected a list of events")
        out: list[EventRecord] = []
        for ev in events:
            if not isinstance(ev, dict) or not isinstance(ev.get("name"), str) or not ev["name"]:
                raise EventSchemaError(f"{component}: every event needs a non-empty 'name'")
            args = ev.get("args", [])
            if not isinstance(args, list):
                raise EventSchemaError(f"{component}.{ev['name']}: 'args' must be a list")
            params = []
            for a in args:
                p = _parse_arg(component, ev["name"], a)
                params.append(Parameter(name=p.name, type=type_map.normalize(p.type)))
            out.append(EventRecord(name=ev["name"], args=tuple(params)))
        components[component] = tuple(out)
    return EventSchema(components=components)


def load_event_schema(path: Path, *, type_map: TypeMap = HEADER_TYPES) -> EventSchema:
    path = Path(path)
    if not path.exists():
        raise EventSchemaError(f"event schema not found at {path}")
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise EventSchemaError(f"failed to parse event schema {path}: {e}") from e
    return parse_event_schema(obj, type_map=type_map)
