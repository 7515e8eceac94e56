from __future__ import annotations

import json
from pathlib import Path

import pytest

ACTORS_APIS = """#include "../ComponentManager.hpp"

OMP_CAPI(Actor_Create, objectPtr(int modelid, float x, float y, float z, float rotation, int* id))
{
	COMPONENT_CHECK_RET(actors, nullptr);
	return nullptr;
}

OMP_CAPI(Actor_Destroy, bool(objectPtr actor))
{
	return true;
}
"""

CORE_APIS = """OMP_CAPI(Core_TickCount, uint32_t())
{
	return 0;
}

OMP_CAPI(Core_GetVersion, ComponentVersion())
{
	return ComponentVersion();
}

OMP_CAPI(Core_Log, bool(StringCharPtr text))
{
	return true;
}
"""

PLAYERS_APIS = """OMP_CAPI(Player_GetName, int(objectPtr player, OutputStringViewPtr name))
{
	return 0;
}

OMP_CAPI(Player_SetPos_FindZ, bool(objectPtr player, float x, float y, float z))
{
	return true;
}
"""

# Not an *APIs.cpp file; never scanned.
HELPERS = """OMP_CAPI(Helper_Ignored, void())
"""

EVENTS = {
    "Player": [
        {
            "name": "OnPlayerConnect",
            "args": [
                {"name": "playerid", "type": "int"},
                {"name": "ip", "type": "CAPIStringView"},
            ],
        },
        {"name": "OnPlayerSpawn", "args": [{"name": "player", "type": "objectPtr"}]},
    ],
    "Actor": [
        {"name": "OnPlayerGiveDamageActor", "args": [{"name": "actor", "type": "objectPtr"}]},
    ],
}


def write_capi_tree(root: Path) -> Path:
    capi = root / "Impl"
    files = {
        "Players/PlayersAPIs.cpp": PLAYERS_APIS,
        "Core/CoreAPIs.cpp": CORE_APIS,
        "Actors/ActorsAPIs.cpp": ACTORS_APIS,
        "Players/Helpers.cpp": HELPERS,
    }
    for rel, text in files.items():
        p = capi / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
    return capi


@pytest.fixture()
def capi_dir(tmp_path: Path) -> Path:
    return write_capi_tree(tmp_path)


@pytest.fixture()
def events_file(tmp_path: Path) -> Path:
    p = tmp_path / "apidocs" / "events.json"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(EVENTS, indent=2), encoding="utf-8")
    return p
