#!/usr/bin/env python3
"""Add the DDNet/Gores switch votes to existing DDNet type configs.

The switch block is inserted right after the ``sv_server_type`` line of each
``types/<name>/flexvotes.cfg``. Files that already mention the Gores switch are
left untouched, so the tool can be re-run safely.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path

from gores_common import (
    DEFAULT_TYPES_DIR,
    error,
    info,
    success,
    warn,
    write_report,
)


# novice and moderate are maintained by hand, gores.* are generated
DDNET_TYPES = (
    "brutal",
    "insane",
    "dummy",
    "ddmax.easy",
    "ddmax.next",
    "ddmax.nut",
    "ddmax.pro",
    "oldschool",
    "solo",
    "race",
    "fun",
    "event",
)

GORES_SWITCH_LINES = (
    'add_vote "☒ DDNᴇᴛ Mᴀᴘs" "info"',
    'add_vote "☐ Gᴏʀᴇs Mᴀᴘs" "clear_votes; exec types/gores.main/flexvotes.cfg; exec types/gores.main/votes.cfg"',
    'add_vote " " "info"',
)
GORES_SWITCH_MARKER = "Gᴏʀᴇs Mᴀᴘs"
SERVER_TYPE_PREFIX = "sv_server_type"
FLEXVOTES_FILE = "flexvotes.cfg"

STATUS_UPDATED = "updated"
STATUS_ALREADY_PATCHED = "already_patched"
STATUS_MISSING_SERVER_TYPE = "missing_server_type"
STATUS_FAILED = "failed"
PROBLEM_STATUSES = {STATUS_MISSING_SERVER_TYPE, STATUS_FAILED}


@dataclass(frozen=True)
class PatchOutcome:
    type_name: str
    path: str
    status: str
    message: str = ""


def insert_after_server_type(content: str, block: tuple[str, ...]) -> str | None:
    lines = content.split("\n")
    for index, line in enumerate(lines):
        if line.startswith(SERVER_TYPE_PREFIX):
            # inserted lines follow the CRLF/LF ending of the sv_server_type line
            ending = "\r" if line.endswith("\r") else ""
            lines[index + 1 : index + 1] = [f"{block_line}{ending}" for block_line in block]
            return "\n".join(lines)
    return None


def patch_flexvotes(
    type_name: str,
    path: Path,
    block: tuple[str, ...] = GORES_SWITCH_LINES,
    marker: str = GORES_SWITCH_MARKER,
) -> PatchOutcome:
    try:
        with path.open("r", encoding="utf-8", newline="") as handle:
            content = handle.read()
        if marker in content:
            return PatchOutcome(type_name, path.as_posix(), STATUS_ALREADY_PATCHED)

        patched = insert_after_server_type(content, block)
        if patched is None:
            return PatchOutcome(
                type_name,
                path.as_posix(),
                STATUS_MISSING_SERVER_TYPE,
                f"no {SERVER_TYPE_PREFIX} line found",
            )

        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(patched)
    except (OSError, UnicodeDecodeError) as exc:
        return PatchOutcome(type_name, path.as_posix(), STATUS_FAILED, str(exc))

    return PatchOutcome(type_name, path.as_posix(), STATUS_UPDATED)


def patch_types(
    types_dir: Path,
    type_names: tuple[str, ...],
    block: tuple[str, ...] = GORES_SWITCH_LINES,
    marker: str = GORES_SWITCH_MARKER,
) -> list[PatchOutcome]:
    return [
        patch_flexvotes(type_name, types_dir / type_name / FLEXVOTES_FILE, block, marker)
        for type_name in type_names
    ]


def print_outcome(outcome: PatchOutcome) -> None:
    if outcome.status == STATUS_UPDATED:
        success(f"updated {outcome.type_name}")
    elif outcome.status == STATUS_ALREADY_PATCHED:
        info(f"⏭️  skipped {outcome.type_name}: Gores switch already present")
    elif outcome.status == STATUS_MISSING_SERVER_TYPE:
        warn(f"{outcome.type_name}: {outcome.message}")
    else:
        error(f"failed to update {outcome.type_name}: {outcome.message}")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "types",
        nargs="*",
        default=list(DDNET_TYPES),
        help="Type folder names to patch (default: all non-Gores DDNet types)",
    )
    parser.add_argument("--types-dir", default=str(DEFAULT_TYPES_DIR), help="Server types folder")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit non-zero when a target lacks sv_server_type or could not be read/written.",
    )
    parser.add_argument("--report", default="", help="Optional path for JSON summary output")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    types_dir = Path(args.types_dir).resolve()

    info("🚀 Updating flexvotes.cfg of DDNet types...\n")

    outcomes = patch_types(types_dir, tuple(args.types))
    for outcome in outcomes:
        print_outcome(outcome)

    counts = {status: 0 for status in (STATUS_UPDATED, STATUS_ALREADY_PATCHED, STATUS_MISSING_SERVER_TYPE, STATUS_FAILED)}
    for outcome in outcomes:
        counts[outcome.status] += 1

    info(
        f"\n✨ Done: {counts[STATUS_UPDATED]} updated, {counts[STATUS_ALREADY_PATCHED]} already patched, "
        f"{counts[STATUS_MISSING_SERVER_TYPE] + counts[STATUS_FAILED]} skipped"
    )

    if args.report:
        write_report(
            Path(args.report),
            {
                "typesDir": types_dir.as_posix(),
                "statusCounts": counts,
                "outcomes": [
                    {
                        "typeName": outcome.type_name,
                        "path": outcome.path,
                        "status": outcome.status,
                        "message": outcome.message,
                    }
                    for outcome in outcomes
                ],
            },
        )

    if args.strict and any(outcome.status in PROBLEM_STATUSES for outcome in outcomes):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
