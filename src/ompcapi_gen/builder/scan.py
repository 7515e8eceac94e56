from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..errors import ScanError
from ..typemap import HEADER_TYPES, TypeMap
from .parse import API_PREFIX, parse_annotation_line
from .symbols import APISurface, SourceLocation

logger = logging.getLogger(__name__)

API_FILE_SUFFIX = "APIs.cpp"


@dataclass(frozen=True)
class AnnotationLine:
    path: Path
    lineno: int
    text: str


def iter_source_files(root: Path, *, suffix: str = API_FILE_SUFFIX) -> list[Path]:
    """Return files under `root` whose name ends with `suffix`.

    Sorted by POSIX path relative to `root` so regenerations are stable
    regardless of filesystem enumeration order.
    """
    root = Path(root)
    if not root.is_dir():
        raise ScanError(f"source directory not found: {root}")
    files = [p for p in root.rglob("*") if p.is_file() and p.name.endswith(suffix)]
    return sorted(files, key=lambda p: p.relative_to(root).as_posix())


def iter_file_lines(path: Path) -> Iterator[str]:
    try:
        with Path(path).open("r", encoding="utf-8", newline=None) as f:
            for line in f:
                yield line.rstrip("\r\n")
    except UnicodeDecodeError as e:
        raise ScanError(f"{path} is not valid UTF-8: {e}") from e
    except OSError as e:
        raise ScanError(f"failed to read {path}: {e}") from e


def iter_annotation_lines(
    root: Path,
    *,
    suffix: str = API_FILE_SUFFIX,
    prefix: str = API_PREFIX,
) -> Iterator[AnnotationLine]:
    for path in iter_source_files(root, suffix=suffix):
        for lineno, line in enumerate(iter_file_lines(path), start=1):
            if line.startswith(prefix):
                yield AnnotationLine(path=path, lineno=lineno, text=line)


def scan_tree(
    root: Path,
    *,
    type_map: TypeMap = HEADER_TYPES,
    flat_names: bool = False,
    strict: bool = False,
    suffix: str = API_FILE_SUFFIX,
    prefix: str = API_PREFIX,
) -> APISurface:
    """Scan `root` for annotated functions and group them by API group."""
    root = Path(root)
    surface = APISurface(strict=strict)
    for ann in iter_annotation_lines(root, suffix=suffix, prefix=prefix):
        rel = ann.path.relative_to(root).as_posix()
        record = parse_annotation_line(
            ann.text,
            type_map=type_map,
            flat_names=flat_names,
            prefix=prefix,
            source=SourceLocation(path=rel, lineno=ann.lineno),
        )
        surface.add(record)
    logger.debug("scanned %d records in %d groups under %s", len(surface), len(surface.groups()), root)
    return surface
