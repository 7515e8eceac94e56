from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--capi-dir",
        default=None,
        help="Directory scanned for *APIs.cpp files (default: OMPCAPI_GEN_CAPI_DIR or ../../Server/Components/CAPI/Impl).",
    )
    p.add_argument("--strict", action="store_true", help="Fail on duplicate Group_Name symbols instead of warning.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="ompcapi-gen")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Print ompcapi-gen version.")

    p_header = sub.add_parser("header", help="Generate the single-file C header (ompcapi.h).")
    _add_common(p_header)
    p_header.add_argument("--events", default=None, help="Event schema JSON (default: ../apidocs/events.json).")
    p_header.add_argument("--out", default=None, help="Output header path (default: ../include/ompcapi.h).")

    p_docs = sub.add_parser("docs", help="Generate the API documentation document (api.json).")
    _add_common(p_docs)
    p_docs.add_argument(
        "--out",
        default=None,
        help="Output path (default: ../apidocs/api.json). A .msgpack suffix writes MessagePack.",
    )

    p_all = sub.add_parser("all", help="Generate both the header and the API documentation.")
    _add_common(p_all)
    p_all.add_argument("--events", default=None, help="Event schema JSON (default: ../apidocs/events.json).")
    p_all.add_argument("--header-out", default=None, help="Output header path.")
    p_all.add_argument("--docs-out", default=None, help="Output API documentation path.")

    args = parser.parse_args(argv)
    if args.cmd == "version":
        from .generate import generator_version

        print(generator_version())
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from .errors import OmpCapiGenError
    from .generate import GeneratorConfig, generate_all, generate_docs, generate_header

    overrides: dict[str, object] = {"strict": bool(args.strict)}
    if args.capi_dir:
        overrides["capi_dir"] = Path(args.capi_dir)
    if getattr(args, "events", None):
        overrides["events_file"] = Path(args.events)
    if args.cmd == "header" and args.out:
        overrides["header_out"] = Path(args.out)
    if args.cmd == "docs" and args.out:
        overrides["docs_out"] = Path(args.out)
    if args.cmd == "all":
        if args.header_out:
            overrides["header_out"] = Path(args.header_out)
        if args.docs_out:
            overrides["docs_out"] = Path(args.docs_out)
    cfg = GeneratorConfig(**overrides)  # type: ignore[arg-type]

    try:
        if args.cmd == "header":
            results = [generate_header(cfg)]
        elif args.cmd == "docs":
            results = [generate_docs(cfg)]
        else:
            results = generate_all(cfg)
    except OmpCapiGenError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(1) from e

    for r in results:
        print(f"generated: {r.path}")
