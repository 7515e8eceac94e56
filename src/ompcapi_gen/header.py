"""Assemble the single-file C header from the scanned API surface.

The header is built from an in-memory `HeaderModel`; each section is a pure
function returning lines, and `render_header` joins them in a fixed order:

1. preamble (platform loader macros, shared event/string/version records)
2. entity handle aliases
3. function-pointer typedefs, per group
4. event argument records and callback typedefs, per component
5. dispatch-table structs, per group
6. the `OMPAPI_t` aggregate
7. `omp_initialize_capi`
8. footer
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .builder.parse import render_params
from .builder.symbols import APISurface, EventSchema
from .errors import EmitError, HeaderError

ENTITY_TYPES = (
    "Player",
    "Vehicle",
    "Menu",
    "TextDraw",
    "TextLabel",
    "Object",
    "PlayerObject",
    "PlayerTextLabel3D",
    "PlayerTextDraw",
    "Class",
    "GangZone",
    "Pickup",
    "NPC",
)

LIBRARY_NAME = "$CAPI"
SENTINEL = ("Core", "TickCount")
ROOT_STRUCT = "OMPAPI_t"
INIT_FUNCTION = "omp_initialize_capi"
WIN32_CHECK = "#if defined(WIN32) || defined(_WIN32) || defined(__WIN32__)"

_PREAMBLE = f"""#ifndef OMPCAPI_H
#define OMPCAPI_H

#include <stdint.h>
#include <stdbool.h>

#ifndef CAPI_COMPONENT_BUILD
{WIN32_CHECK}
#include <Windows.h>
#define LIBRARY_OPEN(path) LoadLibrary(path)
#define LIBRARY_GET_ADDR(lib, symbol) GetProcAddress((HMODULE)lib, symbol)
#else
#include <dlfcn.h>
#define LIBRARY_OPEN(path) dlopen(path, RTLD_LAZY | RTLD_LOCAL)
#define LIBRARY_GET_ADDR dlsym
#endif
#endif

{WIN32_CHECK}
#define OMP_API_EXPORT __declspec(dllexport)
#else
#define OMP_API_EXPORT __attribute__((visibility("default")))
#endif

// Events

enum EventPriorityType
{{
	EventPriorityType_Highest,
	EventPriorityType_FairlyHigh,
	EventPriorityType_Default,
	EventPriorityType_FairlyLow,
	EventPriorityType_Lowest,
}};

struct EventArgs_Common
{{
	int size;
	void** list;
}};

typedef bool (*EventCallback_Common)(struct EventArgs_Common* args);

// Components

struct ComponentVersion
{{
	uint8_t major; ///< MAJOR version when you make incompatible API changes
	uint8_t minor; ///< MINOR version when you add functionality in a backwards compatible manner
	uint8_t patch; ///< PATCH version when you make backwards compatible bug fixes
	uint16_t prerel; ///< PRE-RELEASE version
}};

typedef void (*ComponentOnReadyCallback)();
typedef void (*ComponentOnResetCallback)();
typedef void (*ComponentOnFreeCallback)();

/* Borrowed, read-only view. Callee does NOT copy or allocate.
   Lifetime is tied to the source that produced it. */
struct CAPIStringView
{{
	unsigned int len; /* string length */
	const char* data; /* may not be NUL-terminated */
}};

/* Caller-provided, writable buffer. Callee copies into this.
   'capacity' is total space available in 'data'. Callee sets 'len' written. */
struct CAPIStringBuffer
{{
	unsigned int capacity; /* bytes available in 'data' */
	unsigned int len; /* bytes actually written (out) */
	char* data; /* writable buffer supplied by the caller */
}};

#ifndef CAPI_COMPONENT_BUILD
"""


@dataclass(frozen=True)
class HeaderModel:
    surface: APISurface
    events: EventSchema
    entity_types: tuple[str, ...] = ENTITY_TYPES
    library_name: str = LIBRARY_NAME
    sentinel: tuple[str, str] = SENTINEL


def preamble() -> list[str]:
    return _PREAMBLE.split("\n")


def entity_aliases(entity_types: tuple[str, ...]) -> list[str]:
    return [f"typedef void* {name};" for name in entity_types]


def function_typedefs(surface: APISurface) -> list[str]:
    lines: list[str] = []
    for group, records in surface.items():
        lines.append("")
        lines.append("")
        lines.append(f"// {group} function type definitions")
        for r in records:
            lines.append(f"typedef {r.return_type} (*{group}_{r.name}_t)({render_params(r.params)});")
    return lines


def event_typedefs(events: EventSchema) -> list[str]:
    lines: list[str] = []
    for component, records in events.items():
        lines.append("")
        lines.append("")
        lines.append(f"// {component} event type and arguments definitions")
        for ev in records:
            lines.append(f"struct EventArgs_{ev.name} {{")
            lines.append("    int size;")
            lines.append("    struct {")
            if ev.args:
                for a in ev.args:
                    lines.append(f"        {a.type}* {a.name};")
            else:
                lines.append("")
            lines.append("    } *list;")
            lines.append("};")
            lines.append(
                f"typedef bool (*EventCallback_{ev.name})(struct EventArgs_{ev.name} args);"
            )
    return lines


def dispatch_tables(surface: APISurface) -> list[str]:
    lines: list[str] = []
    for group, records in surface.items():
        lines.append("")
        lines.append(f"// {group} functions")
        lines.append(f"struct {group}_t {{")
        for r in records:
            lines.append(f"    {group}_{r.name}_t {r.name};")
        lines.append("};")
    return lines


def root_aggregate(surface: APISurface) -> list[str]:
    lines = ["", "// All APIs", f"struct {ROOT_STRUCT} {{"]
    for group in surface.groups():
        lines.append(f"    struct {group}_t {group};")
    lines.append("};")
    return lines


def _bind(group: str, name: str, symbol: str) -> str:
    return f'    ompapi->{group}.{name} = ({group}_{name}_t)LIBRARY_GET_ADDR(capi_lib, "{symbol}");'


def initializer(surface: APISurface, *, library_name: str = LIBRARY_NAME, sentinel: tuple[str, str] = SENTINEL) -> list[str]:
    """Emit the loader that fills `OMPAPI_t` from the shared library.

    The sentinel symbol is mandatory: without it the function returns false
    before touching any other field. Every record, the sentinel included,
    is then bound in group order; a symbol the library does not export
    leaves its field NULL.
    """
    record = surface.get(*sentinel)
    if record is None:
        raise HeaderError(f"sentinel symbol {sentinel[0]}_{sentinel[1]} not found in scanned API surface")
    sg, sn = sentinel

    lines = [
        "",
        f"static bool {INIT_FUNCTION}(struct {ROOT_STRUCT}* ompapi) {{",
        WIN32_CHECK,
        f'    void* capi_lib = LIBRARY_OPEN("./components/{library_name}.dll");',
        "#else",
        f'    void* capi_lib = LIBRARY_OPEN("./components/{library_name}.so");',
        "#endif",
        "",
        "    // Check if library was loaded successfully",
        "    if (!capi_lib)",
        "    {",
        "        return false;",
        "    }",
        "",
        "    // Verify one of the core C apis is available",
        _bind(sg, sn, record.symbol),
        "",
        f"    if (!ompapi->{sg}.{sn})",
        "    {",
        "        return false;",
        "    }",
    ]
    for group, records in surface.items():
        lines.append("")
        lines.append(f"    // Retrieve {group} functions")
        for r in records:
            lines.append(_bind(group, r.name, r.symbol))
    lines.append("")
    lines.append("    return true;")
    lines.append("};")
    return lines


def footer() -> list[str]:
    return ["", "#endif", "", "#endif /* OMPCAPI_H */"]


def render_header(model: HeaderModel) -> str:
    sections = [
        preamble(),
        entity_aliases(model.entity_types),
        function_typedefs(model.surface),
        event_typedefs(model.events),
        [""],
        dispatch_tables(model.surface),
        root_aggregate(model.surface),
        initializer(model.surface, library_name=model.library_name, sentinel=model.sentinel),
        footer(),
    ]
    lines: list[str] = []
    for section in sections:
        lines.extend(section)
    return "\n".join(lines) + "\n"


def write_header(model: HeaderModel, out_file: Path) -> Path:
    text = render_header(model)
    out_file = Path(out_file)
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_text(text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise EmitError(f"failed to write header {out_file}: {e}") from e
    return out_file
