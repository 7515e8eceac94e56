"""API documentation document (`api.json`) for tooling."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import msgpack

from .builder.parse import API_PREFIX
from .builder.scan import API_FILE_SUFFIX, scan_tree
from .builder.symbols import APISurface
from .errors import EmitError
from .typemap import DOCS_TYPES


def scan_docs_surface(
    root: Path,
    *,
    strict: bool = False,
    suffix: str = API_FILE_SUFFIX,
    prefix: str = API_PREFIX,
) -> APISurface:
    """Scan with the documentation type spellings and unsplit `Group_Name` names."""
    return scan_tree(
        root,
        type_map=DOCS_TYPES,
        flat_names=True,
        strict=strict,
        suffix=suffix,
        prefix=prefix,
    )


def build_api_docs(surface: APISurface) -> dict[str, list[dict[str, Any]]]:
    docs: dict[str, list[dict[str, Any]]] = {}
    for group, records in surface.items():
        docs[group] = [
            {
                "ret": r.return_type,
                "name": r.name,
                "params": [{"name": p.name, "type": p.type} for p in r.params],
            }
            for r in records
        ]
    return docs


def encode_api_docs(docs: dict[str, Any], *, fmt: str = "json") -> bytes:
    if fmt == "json":
        return (json.dumps(docs, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    if fmt == "msgpack":
        return msgpack.packb(docs, use_bin_type=True)
    raise ValueError(f"unsupported docs format: {fmt}")


def write_api_docs(docs: dict[str, Any], out_file: Path) -> Path:
    """Write `docs` as JSON, or as MessagePack when `out_file` ends in `.msgpack`."""
    out_file = Path(out_file)
    fmt = "msgpack" if out_file.suffix == ".msgpack" else "json"
    payload = encode_api_docs(docs, fmt=fmt)
    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_bytes(payload)
    except OSError as e:
        raise EmitError(f"failed to write API docs {out_file}: {e}") from e
    return out_file
