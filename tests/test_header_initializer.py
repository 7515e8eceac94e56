import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from ompcapi_gen.builder.scan import scan_tree
from ompcapi_gen.events import load_event_schema
from ompcapi_gen.header import HeaderModel, write_header

CONSUMER = """#include <stdio.h>
#include "ompcapi.h"

int main(void)
{
    struct OMPAPI_t api = {0};
    bool ok = omp_initialize_capi(&api);
    printf("ok=%d tick=%d destroy=%d create=%d\\n",
        ok,
        api.Core.TickCount != NULL,
        api.Actor.Destroy != NULL,
        api.Actor.Create != NULL);
    return 0;
}
"""


def _build_stub_library(work: Path, symbols: list[str]) -> Path:
    src = work / "stub.c"
    src.write_text("".join(f"int {s}(void) {{ return 1; }}\n" for s in symbols), encoding="utf-8")
    lib = work / "components" / "$CAPI.so"
    lib.parent.mkdir(parents=True)
    subprocess.check_call(["cc", "-shared", "-fPIC", "-o", str(lib), str(src)])
    return lib


@pytest.mark.skipif(
    shutil.which("cc") is None or sys.platform == "win32",
    reason="needs a C compiler and dlopen",
)
def test_compiled_initializer_against_stub_libraries(capi_dir: Path, events_file: Path, tmp_path: Path):
    surface = scan_tree(capi_dir)
    include = tmp_path / "include"
    write_header(HeaderModel(surface=surface, events=load_event_schema(events_file)), include / "ompcapi.h")

    consumer_src = tmp_path / "consumer.c"
    consumer_src.write_text(CONSUMER, encoding="utf-8")
    consumer = tmp_path / "consumer"
    subprocess.check_call(["cc", f"-I{include}", str(consumer_src), "-o", str(consumer), "-ldl"])

    symbols = [r.symbol for r in surface]
    variants = {
        "full": (symbols, "ok=1 tick=1 destroy=1 create=1"),
        "no_sentinel": ([s for s in symbols if s != "Core_TickCount"], "ok=0 tick=0 destroy=0 create=0"),
        "no_destroy": ([s for s in symbols if s != "Actor_Destroy"], "ok=1 tick=1 destroy=0 create=1"),
    }
    for name, (exported, expected) in variants.items():
        work = tmp_path / name
        work.mkdir()
        _build_stub_library(work, exported)
        out = subprocess.check_output([str(consumer)], cwd=work, text=True)
        assert out.strip() == expected, name
