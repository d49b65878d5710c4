#!/usr/bin/env python3
"""Generate Gores vote configs for every difficulty.

For each entry of the difficulty table this scans ``gores/<Difficulty>/*.map``
and writes ``types/gores.<difficulty>/`` with three files:

- ``flexvotes.cfg``: server type, DDNet/Gores switch and difficulty switch votes
- ``votes.cfg``: one ``change_map`` vote per map
- ``flexreset.cfg``: baseline settings re-applied before each map change
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from pathlib import Path

from gores_common import (
    DEFAULT_GORES_DIR,
    DEFAULT_TYPES_DIR,
    GoresDifficulty,
    error,
    info,
    resolve_difficulties,
    scan_map_files,
    success,
    warn,
    write_report,
    write_text,
)


FLEXVOTES_FILE = "flexvotes.cfg"
VOTES_FILE = "votes.cfg"
FLEXRESET_FILE = "flexreset.cfg"
SOLO_FOLDER = "Solo"

STARS_SYMBOLS = (
    "✰✰✰✰✰",
    "★✰✰✰✰",
    "★★✰✰✰",
    "★★★✰✰",
    "★★★★✰",
    "★★★★★",
)


@dataclass(frozen=True)
class TierArtifacts:
    folder_name: str
    files: dict[str, str]


@dataclass
class TierResult:
    folder: str
    folder_name: str
    map_count: int
    created_dir: bool
    written_files: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class VoteTreeReport:
    tiers: list[TierResult] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [warning for tier in self.tiers for warning in tier.warnings]

    @property
    def total_maps(self) -> int:
        return sum(tier.map_count for tier in self.tiers)

    @property
    def total_files(self) -> int:
        return sum(len(tier.written_files) for tier in self.tiers)


def stars_symbol(stars: int) -> str:
    return STARS_SYMBOLS[min(max(0, stars), 5)]


def escape_vote_argument(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def types_folder_name(difficulty: GoresDifficulty) -> str:
    return f"gores.{difficulty.folder.lower()}"


def _types_path(difficulty: GoresDifficulty, filename: str) -> str:
    return f"types/{types_folder_name(difficulty)}/{filename}"


def _load_menus_command(difficulty: GoresDifficulty) -> str:
    return (
        f"clear_votes; exec {_types_path(difficulty, FLEXVOTES_FILE)}; "
        f"exec {_types_path(difficulty, VOTES_FILE)}"
    )


def render_flexvotes_cfg(difficulty: GoresDifficulty, difficulties: tuple[GoresDifficulty, ...]) -> str:
    reset_file = _types_path(difficulty, FLEXRESET_FILE)
    lines: list[str] = []

    lines.append(f'sv_server_type "{difficulty.server_type}"')
    lines.append("")

    lines.append(
        'add_vote "☐ DDNᴇᴛ Mᴀᴘs" '
        '"clear_votes; exec types/novice/flexvotes.cfg; exec types/novice/votes.cfg"'
    )
    lines.append('add_vote "☒ Gᴏʀᴇs Mᴀᴘs" "info"')
    lines.append('add_vote " " "info"')
    lines.append("")

    for other in difficulties:
        if other.folder == difficulty.folder:
            lines.append(f'add_vote "☒ Gᴏʀᴇs {other.name}" "info"')
        else:
            lines.append(f'add_vote "☐ Gᴏʀᴇs {other.name}" "{_load_menus_command(other)}"')

    lines.append('add_vote "  " "info"')
    lines.append("")

    lines.append('add_vote "Make sure no one is racing before voting!" "info"')
    lines.append(
        f'add_vote "Random Gores {difficulty.folder} Map (Reason=Stars)" '
        f'"sv_reset_file {reset_file}; random_map"'
    )
    lines.append(
        f'add_vote "Random Gores {difficulty.folder} Map Unfinished by Vote Caller (Reason=Stars)" '
        f'"sv_reset_file {reset_file}; random_unfinished_map"'
    )
    lines.append('add_vote "   " "info"')

    return "\n".join(lines)


def render_votes_cfg(difficulty: GoresDifficulty, map_names: list[str]) -> str:
    reset_file = _types_path(difficulty, FLEXRESET_FILE)
    stars = stars_symbol(difficulty.default_stars)
    lines = [
        'add_vote " " "info"',
        f'add_vote "─── GORES {difficulty.folder.upper()} MAPS ───" "info"',
    ]

    for map_name in map_names:
        label = escape_vote_argument(f"{map_name} | {stars}")
        # map name sits inside the quoted command, so it is escaped twice
        change_map = escape_vote_argument(f'change_map "{escape_vote_argument(map_name)}"')
        lines.append(f'add_vote "{label}" "sv_reset_file {reset_file}; {change_map}"')

    return "\n".join(lines)


def render_flexreset_cfg(difficulty: GoresDifficulty) -> str:
    solo = 1 if difficulty.folder == SOLO_FOLDER else 0
    lines = [
        "exec reset.cfg",
        f"sv_solo_server {solo}",
        "sv_vote_kick 1",
        "sv_deepfly 0",
        "clear_votes",
        f"exec {_types_path(difficulty, FLEXVOTES_FILE)}",
        f"exec {_types_path(difficulty, VOTES_FILE)}",
    ]
    return "\n".join(lines)


def render_tier_artifacts(
    difficulty: GoresDifficulty,
    difficulties: tuple[GoresDifficulty, ...],
    map_names: list[str],
) -> TierArtifacts:
    return TierArtifacts(
        folder_name=types_folder_name(difficulty),
        files={
            FLEXVOTES_FILE: render_flexvotes_cfg(difficulty, difficulties),
            VOTES_FILE: render_votes_cfg(difficulty, map_names),
            FLEXRESET_FILE: render_flexreset_cfg(difficulty),
        },
    )


def build_vote_tree(
    difficulties: tuple[GoresDifficulty, ...],
    gores_dir: Path,
    types_dir: Path,
) -> VoteTreeReport:
    if not gores_dir.is_dir():
        raise FileNotFoundError(f"Gores folder does not exist: {gores_dir}")

    report = VoteTreeReport()
    for difficulty in difficulties:
        source_dir = gores_dir / difficulty.folder
        map_names = scan_map_files(source_dir)

        artifacts = render_tier_artifacts(difficulty, difficulties, map_names)
        target_dir = types_dir / artifacts.folder_name
        created_dir = not target_dir.exists()
        target_dir.mkdir(parents=True, exist_ok=True)

        tier = TierResult(
            folder=difficulty.folder,
            folder_name=artifacts.folder_name,
            map_count=len(map_names),
            created_dir=created_dir,
        )
        if not source_dir.is_dir():
            tier.warnings.append(f"Folder does not exist: {source_dir}")
        for filename, content in artifacts.files.items():
            write_text(target_dir / filename, content)
            tier.written_files.append(filename)
        report.tiers.append(tier)

    return report


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate Gores vote configs under types/gores.*")
    parser.add_argument("--gores-dir", default=str(DEFAULT_GORES_DIR), help="Root folder with one subfolder per difficulty")
    parser.add_argument("--types-dir", default=str(DEFAULT_TYPES_DIR), help="Server types folder receiving gores.* configs")
    parser.add_argument("--difficulties", default="", help="Optional JSON file replacing the built-in difficulty table")
    parser.add_argument("--report", default="", help="Optional path for JSON summary output")
    return parser.parse_args()


def print_report(report: VoteTreeReport, types_dir: Path, tier_count: int) -> None:
    for tier in report.tiers:
        info(f"📂 {tier.folder}: {tier.map_count} maps")
        for warning in tier.warnings:
            warn(f"   {warning}")
        if tier.created_dir:
            success(f"   created {types_dir / tier.folder_name}")
        for filename in tier.written_files:
            success(f"   wrote {filename}")

    info("")
    info("✨ Vote configs generated")
    info("📊 Summary:")
    info(f"   - Difficulties: {tier_count}")
    info(f"   - Maps: {report.total_maps}")
    info(f"   - Files: {report.total_files}\n")

    info("📝 Next steps:")
    info("   1. Add the Gores switch to existing DDNet types (update-ddnet-flexvotes.py)")
    info("   2. Refresh the gores_maps table (generate-gores-maps-sql.py)")
    info("   3. Restart the server and test the votes")


def main() -> int:
    args = parse_args()
    gores_dir = Path(args.gores_dir).resolve()
    types_dir = Path(args.types_dir).resolve()
    difficulties = resolve_difficulties(args.difficulties)

    info("🚀 Generating Gores vote configs...\n")

    try:
        report = build_vote_tree(difficulties, gores_dir, types_dir)
    except FileNotFoundError as exc:
        error(str(exc))
        return 1

    print_report(report, types_dir, len(difficulties))

    if args.report:
        write_report(
            Path(args.report),
            {
                "typesDir": types_dir.as_posix(),
                "tiers": [
                    {
                        "folder": tier.folder,
                        "folderName": tier.folder_name,
                        "mapCount": tier.map_count,
                        "createdDir": tier.created_dir,
                        "writtenFiles": tier.written_files,
                        "warnings": tier.warnings,
                    }
                    for tier in report.tiers
                ],
                "warnings": report.warnings,
                "totalMaps": report.total_maps,
                "totalFiles": report.total_files,
            },
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
