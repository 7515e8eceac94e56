"""Generation pipeline: scan, assemble, write."""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .builder.parse import API_PREFIX
from .builder.scan import API_FILE_SUFFIX, scan_tree
from .docgen import build_api_docs, scan_docs_surface, write_api_docs
from .events import load_event_schema
from .header import LIBRARY_NAME, HeaderModel, write_header
from .paths import default_capi_dir, default_events_file, default_output_paths
from .typemap import HEADER_TYPES

logger = logging.getLogger(__name__)


def generator_version() -> str:
    try:
        return importlib.metadata.version("ompcapi-gen")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


@dataclass(frozen=True)
class GeneratorConfig:
    capi_dir: Path = field(default_factory=default_capi_dir)
    events_file: Path = field(default_factory=default_events_file)
    header_out: Path = field(default_factory=lambda: default_output_paths()[0])
    docs_out: Path = field(default_factory=lambda: default_output_paths()[1])
    suffix: str = API_FILE_SUFFIX
    prefix: str = API_PREFIX
    library_name: str = LIBRARY_NAME
    strict: bool = False


@dataclass(frozen=True)
class GenerationResult:
    path: Path
    records: int


def generate_header(cfg: GeneratorConfig) -> GenerationResult:
    surface = scan_tree(
        cfg.capi_dir,
        type_map=HEADER_TYPES,
        strict=cfg.strict,
        suffix=cfg.suffix,
        prefix=cfg.prefix,
    )
    events = load_event_schema(cfg.events_file, type_map=HEADER_TYPES)
    model = HeaderModel(surface=surface, events=events, library_name=cfg.library_name)
    path = write_header(model, cfg.header_out)
    logger.info("wrote %d functions in %d groups, %d events", len(surface), len(surface.groups()), len(events))
    return GenerationResult(path=path, records=len(surface))


def generate_docs(cfg: GeneratorConfig) -> GenerationResult:
    surface = scan_docs_surface(cfg.capi_dir, strict=cfg.strict, suffix=cfg.suffix, prefix=cfg.prefix)
    path = write_api_docs(build_api_docs(surface), cfg.docs_out)
    logger.info("wrote API docs for %d functions", len(surface))
    return GenerationResult(path=path, records=len(surface))


def generate_all(cfg: GeneratorConfig) -> list[GenerationResult]:
    return [generate_header(cfg), generate_docs(cfg)]
