from __future__ import annotations

import os
import sys
from pathlib import Path

from ..errors import OmpCapiGenError


def host_os() -> str:
    override = os.environ.get("OMPCAPI_GEN_OS")
    if override:
        return override

    if sys.platform.startswith("win"):
        return "windows"
    if sys.platform == "darwin":
        return "darwin"
    if sys.platform.startswith("linux"):
        return "linux"
    raise OmpCapiGenError(f"unsupported platform: {sys.platform}")


def library_extension(os_name: str | None = None) -> str:
    # The generated header only distinguishes Windows from everything else.
    if (os_name or host_os()) == "windows":
        return ".dll"
    return ".so"


def library_path(name: str, root: Path | None = None, *, os_name: str | None = None) -> Path:
    """Return `<root>/components/<name><ext>`; `root` defaults to the working directory."""
    base = Path(root) if root is not None else Path(".")
    return base / "components" / f"{name}{library_extension(os_name)}"
