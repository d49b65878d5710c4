#!/usr/bin/env python3
"""Generate the Gores map database import script.

Scans ``gores/<Difficulty>/*.map`` and writes batched ``INSERT`` statements for
the ``gores_maps`` table. Map authors are filled with a placeholder.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from gores_common import (
    DEFAULT_GORES_DIR,
    REPO_ROOT,
    GoresDifficulty,
    error,
    info,
    resolve_difficulties,
    scan_map_files,
    success,
    utc_now_iso,
    write_report,
    write_text,
)


TABLE_NAME = "gores_maps"
COLUMNS = ("Map", "Server", "Mapper", "Points", "Stars")
DEFAULT_MAPPER = "Unknown"
BATCH_SIZE = 100
DEFAULT_OUTPUT = REPO_ROOT / "insert-gores-maps.sql"


@dataclass
class SqlImport:
    lines: list[str] = field(default_factory=list)
    map_counts: dict[str, int] = field(default_factory=dict)

    @property
    def total_maps(self) -> int:
        return sum(self.map_counts.values())

    def render(self) -> str:
        return "\n".join(self.lines)


def escape_sql(value: str) -> str:
    return value.replace("'", "''")


def chunked(items: list[str], size: int) -> Iterator[list[str]]:
    if size <= 0:
        raise ValueError("batch size must be positive")
    for start in range(0, len(items), size):
        yield items[start : start + size]


def render_value_tuple(map_name: str, difficulty: GoresDifficulty) -> str:
    return (
        f"('{escape_sql(map_name)}', '{escape_sql(difficulty.server_type)}', '{DEFAULT_MAPPER}', "
        f"{difficulty.default_points}, {difficulty.default_stars})"
    )


def render_insert_statements(
    difficulty: GoresDifficulty,
    map_names: list[str],
    batch_size: int = BATCH_SIZE,
) -> list[str]:
    lines: list[str] = []
    for batch in chunked(map_names, batch_size):
        lines.append(f"INSERT INTO {TABLE_NAME} ({', '.join(COLUMNS)}) VALUES")
        last_index = len(batch) - 1
        for index, map_name in enumerate(batch):
            terminator = ";" if index == last_index else ","
            lines.append(f"  {render_value_tuple(map_name, difficulty)}{terminator}")
        lines.append("")
    return lines


def render_sql_import(
    difficulties: tuple[GoresDifficulty, ...],
    scan: Callable[[GoresDifficulty], list[str]],
    generated_at: str,
) -> SqlImport:
    result = SqlImport()
    result.lines.extend(
        [
            "-- Gores map database import script",
            f"-- Generated at: {generated_at}",
            "",
            f"-- Note: this script inserts rows into the {TABLE_NAME} table",
            f"-- Replace the map author placeholder ({DEFAULT_MAPPER}) where known",
            "",
        ]
    )

    for difficulty in difficulties:
        map_names = scan(difficulty)
        result.map_counts[difficulty.folder] = len(map_names)
        if not map_names:
            continue

        result.lines.append("")
        result.lines.append(f"-- {difficulty.folder} ({len(map_names)} maps)")
        result.lines.append("")
        result.lines.extend(render_insert_statements(difficulty, map_names))

    result.lines.append("")
    result.lines.append(f"-- Total: {result.total_maps} maps")
    return result


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the gores_maps SQL import script")
    parser.add_argument("--gores-dir", default=str(DEFAULT_GORES_DIR), help="Root folder with one subfolder per difficulty")
    parser.add_argument("--output", default=str(DEFAULT_OUTPUT), help="Output SQL path")
    parser.add_argument("--difficulties", default="", help="Optional JSON file replacing the built-in difficulty table")
    parser.add_argument("--report", default="", help="Optional path for JSON summary output")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    gores_dir = Path(args.gores_dir).resolve()
    output_path = Path(args.output).resolve()
    difficulties = resolve_difficulties(args.difficulties)

    info("🚀 Generating Gores map SQL import script...\n")

    if not gores_dir.is_dir():
        error(f"Gores folder does not exist: {gores_dir}")
        return 1

    sql_import = render_sql_import(
        difficulties,
        lambda difficulty: scan_map_files(gores_dir / difficulty.folder),
        utc_now_iso(),
    )

    output_path.parent.mkdir(parents=True, exist_ok=True)
    write_text(output_path, sql_import.render())

    success(f"SQL script written: {output_path}")
    info("📊 Summary:")
    for folder, count in sql_import.map_counts.items():
        info(f"   - {folder}: {count} maps")
    info(f"   - Total: {sql_import.total_maps} maps\n")

    info("📝 Usage:")
    info("   1. Review the script and fill in map authors")
    info("   2. Run it against your database:")
    info(f"      - MySQL: mysql -u username -p database_name < {output_path.name}")
    info(f"      - SQLite: sqlite3 database.db < {output_path.name}")

    if args.report:
        write_report(
            Path(args.report),
            {
                "outputPath": output_path.as_posix(),
                "mapCounts": sql_import.map_counts,
                "totalMaps": sql_import.total_maps,
            },
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
