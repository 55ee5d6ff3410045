"""Tests for the command-line entry point."""

import json
import sys

import pytest
from blockfit.main import main


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["blockfit", *args])
    main()


class TestMain:
    """Test cases for CLI runs."""

    def test_generate_and_save(self, monkeypatch, capsys, tmp_path):
        output = tmp_path / "out" / "puzzles.json"
        run_cli(monkeypatch, "--level", "3", "--count", "2", "--seed", "5", "--output", str(output))
        data = json.loads(output.read_text())
        assert [p["level_number"] for p in data] == [3, 4]
        assert [len(p["pieces"]) for p in data] == [3, 4]
        assert "Puzzles generated: 2" in capsys.readouterr().out

    def test_show_board(self, monkeypatch, capsys):
        run_cli(monkeypatch, "--level", "1", "--seed", "2", "--show", "--count-solutions")
        out = capsys.readouterr().out
        assert "solution(s)" in out
        assert "A " in out

    def test_settings_file(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("seed: 11\nmax_generation_retries: 100\n")
        run_cli(monkeypatch, str(path), "--level", "2", "--verbose")
        out = capsys.readouterr().out
        assert f"Config: {path}" in out
        assert "Level 2:" in out

    def test_missing_settings_file(self, monkeypatch, capsys, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, str(tmp_path / "missing.yaml"))
        assert exc_info.value.code == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_generation_failure_exits(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc_info:
            run_cli(monkeypatch, "--level", "0")
        assert exc_info.value.code == 1
        assert "Error during generation" in capsys.readouterr().err
