from __future__ import annotations

import json
from pathlib import Path

import pytest

from ompcapi_gen.errors import EmitError, EventSchemaError, ScanError
from ompcapi_gen.generate import GeneratorConfig, generate_all, generate_docs, generate_header


def _cfg(capi_dir: Path, events_file: Path, out: Path, **kw) -> GeneratorConfig:
    return GeneratorConfig(
        capi_dir=capi_dir,
        events_file=events_file,
        header_out=out / "include" / "ompcapi.h",
        docs_out=out / "apidocs" / "api.json",
        **kw,
    )


def test_generate_all_writes_both_artifacts(capi_dir: Path, events_file: Path, tmp_path: Path):
    cfg = _cfg(capi_dir, events_file, tmp_path / "out")
    header, docs = generate_all(cfg)

    assert header.records == 7
    assert "struct OMPAPI_t {" in header.path.read_text(encoding="utf-8")
    assert list(json.loads(docs.path.read_text(encoding="utf-8"))) == ["Actor", "Core", "Player"]
    assert sorted(p.name for p in header.path.parent.iterdir()) == ["ompcapi.h"]
    assert sorted(p.name for p in docs.path.parent.iterdir()) == ["api.json"]


def test_rerun_overwrites_edited_output(capi_dir: Path, events_file: Path, tmp_path: Path):
    cfg = _cfg(capi_dir, events_file, tmp_path / "out")
    first = generate_header(cfg).path.read_bytes()

    cfg.header_out.write_text("/* edited by hand */\n", encoding="utf-8")
    cfg.docs_out.parent.mkdir(parents=True, exist_ok=True)
    cfg.docs_out.write_text("{}", encoding="utf-8")

    assert generate_header(cfg).path.read_bytes() == first
    docs = json.loads(generate_docs(cfg).path.read_text(encoding="utf-8"))
    assert docs["Actor"][0]["name"] == "Actor_Create"


def test_changed_sources_regenerate(capi_dir: Path, events_file: Path, tmp_path: Path):
    cfg = _cfg(capi_dir, events_file, tmp_path / "out")
    generate_docs(cfg)

    with (capi_dir / "Core" / "CoreAPIs.cpp").open("a", encoding="utf-8") as f:
        f.write("OMP_CAPI(Core_Extra, void())\n")

    result = generate_docs(cfg)
    assert result.records == 8
    names = [r["name"] for r in json.loads(result.path.read_text(encoding="utf-8"))["Core"]]
    assert names[-1] == "Core_Extra"



def test_missing_event_schema_is_fatal(capi_dir: Path, tmp_path: Path):
    cfg = _cfg(capi_dir, tmp_path / "missing.json", tmp_path / "out")
    with pytest.raises(EventSchemaError):
        generate_header(cfg)


def test_missing_source_dir_is_fatal(events_file: Path, tmp_path: Path):
    cfg = _cfg(tmp_path / "missing", events_file, tmp_path / "out")
    with pytest.raises(ScanError):
        generate_header(cfg)


def test_unwritable_output_is_fatal(capi_dir: Path, events_file: Path, tmp_path: Path):
    (tmp_path / "out").write_text("file in the way", encoding="utf-8")
    cfg = _cfg(capi_dir, events_file, tmp_path / "out")
    with pytest.raises(EmitError):
        generate_docs(cfg)


def test_default_paths_follow_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("OMPCAPI_GEN_CAPI_DIR", str(tmp_path / "Impl"))
    monkeypatch.setenv("OMPCAPI_GEN_EVENTS_FILE", str(tmp_path / "events.json"))
    monkeypatch.setenv("OMPCAPI_GEN_OUTPUT_DIR", str(tmp_path / "gen"))
    cfg = GeneratorConfig()
    assert cfg.capi_dir == tmp_path / "Impl"
    assert cfg.events_file == tmp_path / "events.json"
    assert cfg.header_out == tmp_path / "gen" / "ompcapi.h"
    assert cfg.docs_out == tmp_path / "gen" / "api.json"


def test_default_paths_without_environment(monkeypatch: pytest.MonkeyPatch):
    for name in ("OMPCAPI_GEN_CAPI_DIR", "OMPCAPI_GEN_EVENTS_FILE", "OMPCAPI_GEN_OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    cfg = GeneratorConfig()
    assert cfg.capi_dir == Path("../../Server/Components/CAPI/Impl")
    assert cfg.header_out == Path("../include/ompcapi.h")
    assert cfg.docs_out == Path("../apidocs/api.json")
