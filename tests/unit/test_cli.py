"""Tests for the clinical-risk CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from clinical_risk.cli.main import app

pytestmark = pytest.mark.usefixtures("restore_logging")

runner = CliRunner()

_LOW = {
    "suicidalIdeation": {"value": "None", "confidence": 0.95},
    "selfHarm": {"value": "None", "confidence": 0.95},
    "homicidalIdeation": {"value": "None", "confidence": 0.95},
    "riskLevelOverall": {"value": "Low", "confidence": 0.95},
}


def _write(tmp_path: Path, name: str, payload: object) -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestAssessCommand:
    def test_clean_case_exits_zero(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(tmp_path, "re.json", _LOW)

        result = runner.invoke(app, ["assess", str(original), str(re_extracted)])

        assert result.exit_code == 0
        assert "No review needed" in result.output

    def test_discrepancy_exits_one_and_writes_output(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(
            tmp_path,
            "re.json",
            {**_LOW, "suicidalIdeation": {"value": "ActiveWithPlan", "confidence": 0.92}},
        )
        out = tmp_path / "result.json"

        result = runner.invoke(app, ["assess", str(original), str(re_extracted), "--output", str(out)])

        assert result.exit_code == 1
        assert "REVIEW REQUIRED" in result.output
        rendered = json.loads(out.read_text(encoding="utf-8"))
        assert rendered["requiresReview"] is True
        assert rendered["discrepancies"][0]["fieldName"] == "SuicidalIdeation"

    def test_note_keywords_checked(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(tmp_path, "re.json", _LOW)
        note = tmp_path / "note.txt"
        note.write_text("Client mentioned suicide in passing.", encoding="utf-8")

        result = runner.invoke(app, ["assess", str(original), str(re_extracted), "--note", str(note)])

        assert result.exit_code == 1
        assert "Suicidal keywords detected" in result.output

    def test_threshold_option(self, tmp_path: Path) -> None:
        payload = {"selfHarm": {"value": "Historical", "confidence": 0.6}}
        original = _write(tmp_path, "original.json", payload)
        re_extracted = _write(tmp_path, "re.json", payload)

        strict = runner.invoke(app, ["assess", str(original), str(re_extracted)])
        lenient = runner.invoke(app, ["assess", str(original), str(re_extracted), "--threshold", "0.5"])

        assert strict.exit_code == 1
        assert lenient.exit_code == 0

    def test_invalid_extraction_exits_two(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", ["not", "an", "object"])
        re_extracted = _write(tmp_path, "re.json", _LOW)

        result = runner.invoke(app, ["assess", str(original), str(re_extracted)])

        assert result.exit_code == 2
        assert "Invalid extraction" in result.output

    def test_missing_note_exits_two(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(tmp_path, "re.json", _LOW)

        result = runner.invoke(
            app, ["assess", str(original), str(re_extracted), "--note", str(tmp_path / "missing.txt")]
        )

        assert result.exit_code == 2

    def test_non_utf8_note_exits_two(self, tmp_path: Path) -> None:
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(tmp_path, "re.json", _LOW)
        note = tmp_path / "note.txt"
        note.write_bytes(b"\xff\xfe\xfa not utf-8")

        result = runner.invoke(app, ["assess", str(original), str(re_extracted), "--note", str(note)])

        assert result.exit_code == 2

    def test_missing_extraction_file_exits_two(self, tmp_path: Path) -> None:
        re_extracted = _write(tmp_path, "re.json", _LOW)

        result = runner.invoke(app, ["assess", str(tmp_path / "nope.json"), str(re_extracted)])

        assert result.exit_code == 2

    def test_fatal_configuration_exits_two(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLINICAL_RISK_ASSESSOR_ALWAYS_REEXTRACT", "false")
        monkeypatch.setenv("CLINICAL_RISK_ASSESSOR_ENABLE_KEYWORD_SAFETY_NET", "false")
        original = _write(tmp_path, "original.json", _LOW)
        re_extracted = _write(tmp_path, "re.json", _LOW)

        result = runner.invoke(app, ["assess", str(original), str(re_extracted)])

        assert result.exit_code == 2
        assert "Configuration error" in result.stdout


class TestScanCommand:
    def test_no_keywords(self, tmp_path: Path) -> None:
        note = tmp_path / "note.txt"
        note.write_text("Discussed sleep and exercise.", encoding="utf-8")

        result = runner.invoke(app, ["scan", str(note)])

        assert result.exit_code == 0
        assert "No danger keywords found" in result.output

    def test_reports_matches(self, tmp_path: Path) -> None:
        note = tmp_path / "note.txt"
        note.write_text("History of cutting; denies homicidal thoughts.", encoding="utf-8")

        result = runner.invoke(app, ["scan", str(note)])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["selfHarmMatches"] == ["cutting"]
        assert payload["homicidalMatches"] == ["homicidal"]

    def test_missing_note_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["scan", str(tmp_path / "missing.txt")])
        assert result.exit_code == 2

    def test_non_utf8_note(self, tmp_path: Path) -> None:
        note = tmp_path / "note.txt"
        note.write_bytes(b"\xff\xfe\xfa")

        result = runner.invoke(app, ["scan", str(note)])

        assert result.exit_code == 2
