from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import pytest

TOOLS_DIR = Path(__file__).resolve().parents[1] / "tools" / "ddnet"


def load_tool(script_name: str) -> ModuleType:
    script_path = TOOLS_DIR / script_name
    module_name = script_path.stem.replace("-", "_")
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    if spec is None or spec.loader is None:
        raise RuntimeError(f"failed to load tool module from {script_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def sql_tool() -> ModuleType:
    return load_tool("generate-gores-maps-sql.py")


@pytest.fixture(scope="session")
def votes_tool() -> ModuleType:
    return load_tool("generate-gores-votes.py")


@pytest.fixture(scope="session")
def patch_tool() -> ModuleType:
    return load_tool("update-ddnet-flexvotes.py")


def touch_maps(folder: Path, *names: str) -> None:
    folder.mkdir(parents=True, exist_ok=True)
    for name in names:
        (folder / name).write_bytes(b"")
