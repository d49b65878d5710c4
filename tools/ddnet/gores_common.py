"""Shared helpers for the DDNet Gores vote and SQL generators.

Holds the difficulty table, the `.map` directory scanner and the console/report
helpers used by the scripts next to this module.
"""

from __future__ import annotations

import datetime as dt
import json
import re
import sys
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any


SCHEMA_VERSION = "1.0"
MAP_EXTENSION = ".map"
REPO_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_GORES_DIR = REPO_ROOT / "gores"
DEFAULT_TYPES_DIR = REPO_ROOT / "types"

_DIGIT_RUN_RE = re.compile(r"(\d+)")


@dataclass(frozen=True)
class GoresDifficulty:
    folder: str
    name: str
    server_type: str
    default_stars: int
    default_points: int


GORES_DIFFICULTIES: tuple[GoresDifficulty, ...] = (
    GoresDifficulty("Easy", "Eᴀsʏ", "Gores_Easy", 2, 5),
    GoresDifficulty("Main", "Mᴀɪɴ", "Gores_Main", 3, 10),
    GoresDifficulty("Hard", "Hᴀʀᴅ", "Gores_Hard", 4, 15),
    GoresDifficulty("Insane", "Iɴsᴀɴᴇ", "Gores_Insane", 5, 20),
    GoresDifficulty("Extreme", "Exᴛʀᴇᴍᴇ", "Gores_Extreme", 5, 25),
    GoresDifficulty("Mod", "Mᴏᴅ", "Gores_Mod", 3, 10),
    GoresDifficulty("Solo", "Sᴏʟᴏ", "Gores_Solo", 3, 10),
)


def utc_now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def validate_difficulties(difficulties: tuple[GoresDifficulty, ...]) -> tuple[GoresDifficulty, ...]:
    seen: set[str] = set()
    for difficulty in difficulties:
        key = difficulty.folder.lower()
        if not key:
            raise ValueError("difficulty folder must not be empty")
        if key in seen:
            raise ValueError(f"duplicate difficulty folder: {difficulty.folder}")
        seen.add(key)
    return difficulties


def load_difficulties(path: Path) -> tuple[GoresDifficulty, ...]:
    """Load a replacement difficulty table from JSON.

    Expected shape: ``{"difficulties": [{"folder": "Easy", "name": "Eᴀsʏ",
    "serverType": "Gores_Easy", "defaultStars": 2, "defaultPoints": 5}]}``.
    """
    with path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    raw_items = payload.get("difficulties") if isinstance(payload, dict) else None
    if not isinstance(raw_items, list):
        raise ValueError("Difficulty file must include difficulties[]")

    difficulties: list[GoresDifficulty] = []
    for item in raw_items:
        if not isinstance(item, dict):
            raise ValueError("difficulty entries must be objects")
        folder = str(item.get("folder") or "").strip()
        server_type = str(item.get("serverType") or f"Gores_{folder}").strip()
        difficulties.append(
            GoresDifficulty(
                folder=folder,
                name=str(item.get("name") or folder).strip(),
                server_type=server_type,
                default_stars=as_int(item.get("defaultStars"), 3),
                default_points=as_int(item.get("defaultPoints"), 10),
            )
        )
    return validate_difficulties(tuple(difficulties))


def resolve_difficulties(path_text: str) -> tuple[GoresDifficulty, ...]:
    if not path_text:
        return GORES_DIFFICULTIES
    return load_difficulties(Path(path_text).resolve())


def map_name_from_filename(filename: str) -> str | None:
    if not filename.endswith(MAP_EXTENSION):
        return None
    return filename[: -len(MAP_EXTENSION)]


def _fold_text(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def natural_sort_key(name: str) -> tuple[tuple[tuple[int, Any], ...], str, str]:
    # digit runs compare as numbers, text runs ignore case and accents;
    # case-folded then raw name break ties
    parts: list[tuple[int, Any]] = []
    for chunk in _DIGIT_RUN_RE.split(name):
        if not chunk:
            continue
        if chunk.isdecimal():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, _fold_text(chunk)))
    return tuple(parts), name.casefold(), name


def scan_map_files(folder: Path) -> list[str]:
    """Return the naturally sorted map names found directly in ``folder``.

    A missing folder yields an empty list; callers decide whether to warn.
    """
    if not folder.is_dir():
        return []

    names: list[str] = []
    for path in folder.iterdir():
        if not path.is_file():
            continue
        map_name = map_name_from_filename(path.name)
        if map_name is not None:
            names.append(map_name)
    return sorted(names, key=natural_sort_key)


def write_text(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def write_report(path: Path, payload: dict[str, Any]) -> None:
    report = {"schemaVersion": SCHEMA_VERSION, "generatedAtUtc": utc_now_iso()}
    report.update(payload)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2, sort_keys=True, ensure_ascii=False) + "\n", encoding="utf-8")


def info(message: str) -> None:
    print(message)


def success(message: str) -> None:
    print(f"✅ {message}")


def warn(message: str) -> None:
    print(f"⚠️  {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"❌ {message}", file=sys.stderr)
