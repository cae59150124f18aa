"""Tests for the command-line entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from termedit.__main__ import build_parser, main
from termedit.config import RenderConfig


def test_parser_defaults():
    args = build_parser().parse_args(["notes.txt"])

    assert args.path == "notes.txt"
    assert args.log_file is None
    assert args.log_level == "info"


def test_parser_log_options():
    args = build_parser().parse_args(["-f", "/tmp/x.log", "--log-level", "debug", "a.txt"])

    assert args.log_file == Path("/tmp/x.log")
    assert args.log_level == "debug"


def test_parser_requires_path():
    with pytest.raises(SystemExit) as exc:
        build_parser().parse_args([])
    assert exc.value.code == 2


def test_parser_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--log-level", "loud", "a.txt"])


def test_version_flag(capsys):
    with patch("termedit.__main__.get_version_string", return_value="9.9.9"):
        parser = build_parser()
    with pytest.raises(SystemExit) as exc:
        parser.parse_args(["--version"])
    assert exc.value.code == 0
    assert "9.9.9" in capsys.readouterr().out


@patch("termedit.__main__.configure_logging")
def test_main_runs_editor_on_loaded_buffer(configure_logging, tmp_path):
    path = tmp_path / "doc.txt"
    path.write_text("one\ntwo")
    log_file = tmp_path / "termedit.log"

    with patch("termedit.editor.run_editor", return_value=[]) as run_editor, \
            patch("termedit.config.load_render_config", return_value=RenderConfig()):
        assert main([str(path), "--log-file", str(log_file)]) == 0

    configure_logging.assert_called_once_with(log_file, "info")
    buffer = run_editor.call_args[0][0]
    assert buffer.lines == ["one", "two"]
    assert buffer.path == str(path)


@patch("termedit.__main__.configure_logging")
def test_main_load_failure_exits_before_editor(configure_logging, tmp_path, capsys):
    with patch("termedit.editor.run_editor") as run_editor:
        assert main([str(tmp_path)]) == 1

    run_editor.assert_not_called()
    assert "Error loading file" in capsys.readouterr().err


@patch("termedit.__main__.configure_logging")
def test_main_reports_producer_errors(configure_logging, tmp_path, capsys):
    with patch("termedit.editor.run_editor", return_value=[EOFError("input stream closed")]), \
            patch("termedit.config.load_render_config", return_value=RenderConfig()):
        assert main([str(tmp_path / "new.txt")]) == 0

    assert "input stream closed" in capsys.readouterr().err
