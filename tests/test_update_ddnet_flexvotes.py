from __future__ import annotations

import json
import sys
from pathlib import Path

BRUTAL_CFG = "\n".join(
    [
        'sv_server_type "Brutal"',
        "",
        'add_vote "Random Brutal Map" "random_map"',
    ]
)


def _write_type(types_dir: Path, type_name: str, content: str) -> Path:
    path = types_dir / type_name / "flexvotes.cfg"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_insert_after_server_type(patch_tool):
    patched = patch_tool.insert_after_server_type(BRUTAL_CFG, ("one", "two"))

    assert patched.split("\n") == [
        'sv_server_type "Brutal"',
        "one",
        "two",
        "",
        'add_vote "Random Brutal Map" "random_map"',
    ]


def test_insert_after_server_type_missing_line(patch_tool):
    assert patch_tool.insert_after_server_type('add_vote "x" "info"', ("one",)) is None


def test_patch_flexvotes_is_idempotent(patch_tool, tmp_path: Path):
    path = _write_type(tmp_path, "brutal", BRUTAL_CFG)

    first = patch_tool.patch_flexvotes("brutal", path)
    after_first = path.read_text(encoding="utf-8")
    second = patch_tool.patch_flexvotes("brutal", path)

    assert first.status == patch_tool.STATUS_UPDATED
    assert second.status == patch_tool.STATUS_ALREADY_PATCHED
    assert path.read_text(encoding="utf-8") == after_first
    assert after_first.split("\n")[1:4] == list(patch_tool.GORES_SWITCH_LINES)


def test_patch_flexvotes_skips_without_server_type(patch_tool, tmp_path: Path):
    original = 'add_vote "Random Map" "random_map"'
    path = _write_type(tmp_path, "fun", original)

    outcome = patch_tool.patch_flexvotes("fun", path)

    assert outcome.status == patch_tool.STATUS_MISSING_SERVER_TYPE
    assert path.read_text(encoding="utf-8") == original


def test_patch_types_isolates_failures(patch_tool, tmp_path: Path):
    _write_type(tmp_path, "brutal", BRUTAL_CFG)
    _write_type(tmp_path, "race", BRUTAL_CFG.replace("Brutal", "Race"))
    (tmp_path / "broken.bin").mkdir()
    (tmp_path / "broken.bin" / "flexvotes.cfg").write_bytes(b"\xff\xfe\xfa")

    outcomes = patch_tool.patch_types(tmp_path, ("brutal", "missing", "broken.bin", "race"))

    assert [outcome.status for outcome in outcomes] == [
        patch_tool.STATUS_UPDATED,
        patch_tool.STATUS_FAILED,
        patch_tool.STATUS_FAILED,
        patch_tool.STATUS_UPDATED,
    ]
    assert outcomes[1].message
    race = (tmp_path / "race" / "flexvotes.cfg").read_text(encoding="utf-8")
    assert patch_tool.GORES_SWITCH_MARKER in race


def test_main_strict_reports_problems(patch_tool, tmp_path: Path, monkeypatch):
    _write_type(tmp_path, "brutal", BRUTAL_CFG)
    report = tmp_path / "report.json"
    argv = ["update-ddnet-flexvotes.py", "brutal", "missing", "--types-dir", str(tmp_path), "--report", str(report)]

    monkeypatch.setattr(sys, "argv", argv)
    assert patch_tool.main() == 0

    monkeypatch.setattr(sys, "argv", argv + ["--strict"])
    assert patch_tool.main() == 1

    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["statusCounts"]["already_patched"] == 1
    assert payload["statusCounts"]["failed"] == 1
    assert [item["typeName"] for item in payload["outcomes"]] == ["brutal", "missing"]


def test_patch_flexvotes_keeps_crlf_line_endings(patch_tool, tmp_path: Path):
    path = tmp_path / "brutal" / "flexvotes.cfg"
    path.parent.mkdir(parents=True)
    path.write_bytes('sv_server_type "Brutal"\r\n\r\nadd_vote "x" "info"\r\n'.encode("utf-8"))

    outcome = patch_tool.patch_flexvotes("brutal", path)

    raw = path.read_bytes()
    assert outcome.status == patch_tool.STATUS_UPDATED
    assert raw.count(b"\n") == raw.count(b"\r\n") == 6
    lines = raw.decode("utf-8").split("\r\n")
    assert lines[0] == 'sv_server_type "Brutal"'
    assert lines[1:4] == list(patch_tool.GORES_SWITCH_LINES)
    assert lines[4:] == ["", 'add_vote "x" "info"', ""]


def test_patch_flexvotes_keeps_lf_line_endings(patch_tool, tmp_path: Path):
    path = tmp_path / "race" / "flexvotes.cfg"
    path.parent.mkdir(parents=True)
    path.write_bytes(b'sv_server_type "Race"\n\nadd_vote "x" "info"\n')

    patch_tool.patch_flexvotes("race", path)

    raw = path.read_bytes()
    assert b"\r" not in raw
    assert raw.count(b"\n") == 6
