from __future__ import annotations

import os
from pathlib import Path

# Layout of the open.mp tools directory the generator is run from.
DEFAULT_CAPI_DIR = Path("../../Server/Components/CAPI/Impl")
DEFAULT_EVENTS_FILE = Path("../apidocs/events.json")
DEFAULT_HEADER_FILE = Path("../include/ompcapi.h")
DEFAULT_DOCS_FILE = Path("../apidocs/api.json")


def default_capi_dir() -> Path:
    """Return the annotated source directory.

    Override with `OMPCAPI_GEN_CAPI_DIR`.
    """
    override = os.environ.get("OMPCAPI_GEN_CAPI_DIR")
    if override:
        return Path(override)
    return DEFAULT_CAPI_DIR


def default_events_file() -> Path:
    """Override with `OMPCAPI_GEN_EVENTS_FILE`."""
    override = os.environ.get("OMPCAPI_GEN_EVENTS_FILE")
    if override:
        return Path(override)
    return DEFAULT_EVENTS_FILE


def default_output_paths() -> tuple[Path, Path]:
    """Return `(header, docs)` output paths.

    `OMPCAPI_GEN_OUTPUT_DIR` places both files (`ompcapi.h`, `api.json`)
    in one directory.
    """
    override = os.environ.get("OMPCAPI_GEN_OUTPUT_DIR")
    if override:
        out = Path(override)
        return out / DEFAULT_HEADER_FILE.name, out / DEFAULT_DOCS_FILE.name
    return DEFAULT_HEADER_FILE, DEFAULT_DOCS_FILE
