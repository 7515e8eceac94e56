"""ompcapi-gen: generate the open.mp C API header and API docs from OMP_CAPI annotations."""

from __future__ import annotations

from . import errors
from .builder.parse import parse_annotation_line
from .builder.scan import scan_tree
from .generate import GeneratorConfig, generate_all, generate_docs, generate_header

__all__ = [
    "errors",
    "GeneratorConfig",
    "generate_all",
    "generate_docs",
    "generate_header",
    "parse_annotation_line",
    "scan_tree",
]
