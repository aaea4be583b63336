"""Tests for the check, compile and explain commands."""

from __future__ import annotations

import json
from pathlib import Path

from bowtie.commands.check_cmd import run_check, run_explain
from bowtie.commands.compile_cmd import run_compile


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_check_clean_document(chemical_spillage_path: Path, capsys) -> None:
    exit_code = run_check(chemical_spillage_path)

    assert exit_code == 0
    captured = capsys.readouterr()
    assert "no errors" in captured.err


def test_check_reports_all_validation_errors(tmp_path: Path, capsys) -> None:
    doc = _write(tmp_path / "bad.bowtie", "cause A\ncause A\nevent E\nbarrier X: Ghost\n")

    exit_code = run_check(doc, output_json=True)

    assert exit_code == 1
    output = json.loads(capsys.readouterr().out)
    assert output["ok"] is False
    assert output["stage"] == "built"
    assert output["stages"] == ["parsed", "built"]
    assert {e["rule"] for e in output["errors"]} == {"duplicate-node", "unresolved-target"}


def test_check_human_output(tmp_path: Path, capsys) -> None:
    doc = _write(tmp_path / "bad.bowtie", "cause A\nevent E\nbarrier X: Ghost\n")

    assert run_check(doc) == 1
    err = capsys.readouterr().err
    assert "unresolved-target" in err
    assert "bad.bowtie:3" in err


def test_compile_json(chemical_spillage_path: Path, capsys) -> None:
    exit_code = run_compile(chemical_spillage_path, fmt="json")

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["title"] == "Chemical Spillage"
    assert payload["event"] == "Chemical Spillage"
    assert [c["name"] for c in payload["causes"]][0] == "Equipment Failure"
    assert payload["causes"][0]["offset"] == -1.5
    assert "geometry" not in payload

    legal = next(b for b in payload["barriers"] if b["name"] == "Legal Compliance")
    assert [t["name"] for t in legal["targets"]] == ["Shutdown of Operations", "Legal Consequences"]


def test_compile_json_with_geometry_and_config(chemical_spillage_path: Path, tmp_path: Path, capsys) -> None:
    config = _write(tmp_path / "bowtie.toml", "[layout]\ncomponent_height = 30\n")
    out = tmp_path / "layout.json"

    exit_code = run_compile(chemical_spillage_path, fmt="json", geometry=True, config=config, out=out)

    assert exit_code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    geometry = payload["geometry"]
    assert len(geometry["edges"]) == 8
    assert all(n["box"]["height"] == 30 for n in geometry["nodes"])
    assert [label["text"] for label in geometry["labels"]][-1] == "Legal Compliance [8]"


def test_compile_bad_settings(chemical_spillage_path: Path, tmp_path: Path) -> None:
    config = _write(tmp_path / "bowtie.toml", "[layout]\nchar_width = -1\n")

    assert run_compile(chemical_spillage_path, fmt="json", geometry=True, config=config) == 2


def test_compile_markdown(chemical_spillage_path: Path, capsys) -> None:
    assert run_compile(chemical_spillage_path) == 0

    out = capsys.readouterr().out
    assert out.startswith("# Chemical Spillage")
    assert "- Equipment Failure: [1] Regular Maintenance" in out
    assert "- Legal Consequences: Legal Compliance [8]" in out
    assert "8. Legal Compliance (Shutdown of Operations, Legal Consequences)" in out


def test_compile_rich_to_file(chemical_spillage_path: Path, tmp_path: Path) -> None:
    out = tmp_path / "layout.txt"

    assert run_compile(chemical_spillage_path, fmt="rich", out=out) == 0
    assert "Legal Compliance" in out.read_text(encoding="utf-8")


def test_compile_failure_exit_code(tmp_path: Path, capsys) -> None:
    doc = _write(tmp_path / "bad.bowtie", "cause A\n")

    assert run_compile(doc, fmt="json") == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing-event" in captured.err


def test_check_unreadable_document(tmp_path: Path, capsys) -> None:
    doc = tmp_path / "latin1.bowtie"
    doc.write_bytes(b"cause \xff\xfe\nevent E\n")

    assert run_check(doc) == 1
    assert "cannot read" in capsys.readouterr().err


def test_compile_unreadable_document(tmp_path: Path, capsys) -> None:
    doc = tmp_path / "latin1.bowtie"
    doc.write_bytes(b"cause \xff\xfe\nevent E\n")

    assert run_compile(doc, fmt="json") == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "cannot read" in captured.err


def test_check_missing_document(tmp_path: Path, capsys) -> None:
    assert run_check(tmp_path / "absent.bowtie") == 1
    assert "cannot read" in capsys.readouterr().err


def test_explain(capsys) -> None:
    assert run_explain("ambiguous-target") == 0
    assert "ambiguous-target" in capsys.readouterr().out

    assert run_explain("no-such-rule") == 1
