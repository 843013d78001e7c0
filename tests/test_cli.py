"""
Tests for the command-line interface.
"""

import json
import logging
from pathlib import Path

import pytest

from script_feedback.cli import default_output_path, main


@pytest.fixture
def request_file(tmp_path, sample_request):
    path = tmp_path / "sample-script.json"
    path.write_text(json.dumps(sample_request), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCli:
    """Tests for the script-feedback entry point."""

    def test_no_arguments_prints_usage(self, capsys):
        assert main([]) == 1
        assert "usage: script-feedback" in capsys.readouterr().out

    def test_default_output_path(self):
        assert default_output_path(Path("examples/sample-script.json")) == Path("examples/sample-script-output.json")

    def test_evaluates_and_writes_report(self, request_file, capsys):
        assert main([str(request_file)]) == 0

        out = capsys.readouterr().out
        assert "PHARMACEUTICAL INFLUENCER SCRIPT FEEDBACK SYSTEM" in out
        assert "Status: NEEDS REVISION" in out
        assert "Comfort:  5/10 (threshold: 7/10)" in out
        assert "REFINED SCRIPT:" in out
        assert 'Issue: "gross"' in out

        output = request_file.with_name("sample-script-output.json")
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["status"] == "NEEDS_REVISION"
        assert data["evaluations"]["comfort"]["flagged_line"] == "gross"
        assert "refinedScript" in data

    def test_custom_output_path(self, request_file, tmp_path):
        output = tmp_path / "report.json"
        assert main([str(request_file), "--output", str(output)]) == 0
        assert json.loads(output.read_text(encoding="utf-8"))["scores"]["humor"] == 4

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_request(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"product": "DermaFlow Pro", "rules": {}}), encoding="utf-8")

        assert main([str(path)]) == 1
        assert 'Input must include "rawScript" (string)' in capsys.readouterr().err
