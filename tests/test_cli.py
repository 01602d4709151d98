"""Tests for the command line entry point."""

import json
import logging
from unittest.mock import patch

import pytest

import main
from conftest import FakeCompressor, asset_bytes, write_asset
from storage.state import state_path


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger("asset_optimize")
    handlers, level, propagate = list(root.handlers), root.level, root.propagate
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate


def _run_cli(args, compressor):
    with patch("main.get_compressor", return_value=compressor):
        return main.main(args)


def test_options_from_args_defaults():
    args = main.build_parser().parse_args([])
    options = main.options_from_args(args)
    assert args.project_root == "./"
    assert options.quality == 80
    assert options.include is None
    assert options.exclude is None
    assert options.save is False


def test_options_from_args_flags():
    args = main.build_parser().parse_args(
        ["app", "--quality", "60", "--include", "*.png", "--exclude", "a.png", "--save"]
    )
    options = main.options_from_args(args)
    assert options.quality == 60
    assert options.has_filters
    assert options.save


def test_cli_optimizes_project(project, capsys):
    write_asset(project, "logo.png", asset_bytes(1))
    compressor = FakeCompressor()

    assert _run_cli([str(project), "--quality", "65"], compressor) == 0

    assert compressor.calls[0][1] == 65
    out = capsys.readouterr().out
    assert "Checking logo.png" in out
    assert "Finished compressing assets. 39.1KB saved." in out
    assert len(json.loads(state_path(project).read_text())) == 1


def test_cli_unavailable_compressor_exits_1(project, capsys):
    write_asset(project, "logo.png", asset_bytes(1))

    assert _run_cli([str(project)], FakeCompressor(available=False)) == 1
    assert "pip install fake-compressor" in capsys.readouterr().out


def test_cli_check(project):
    write_asset(project, "logo.png", asset_bytes(1))
    compressor = FakeCompressor()

    assert _run_cli([str(project), "--check"], compressor) == 1
    assert not state_path(project).exists()

    _run_cli([str(project)], compressor)
    assert _run_cli([str(project), "--check"], compressor) == 0


def test_cli_reports_corrupt_state(project, capsys):
    path = state_path(project)
    path.parent.mkdir()
    path.write_text("[]")

    assert _run_cli([str(project), "--json-logs"], FakeCompressor()) == 1

    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert lines[-1]["severity"] == "ERROR"
    assert lines[-1]["context"]["error"] == "state_corrupt"


def test_cli_reports_undecodable_state(project, capsys):
    path = state_path(project)
    path.parent.mkdir()
    path.write_bytes(b"\xff\xfe\x00garbage")

    assert _run_cli([str(project)], FakeCompressor()) == 1
    assert "is not valid JSON" in capsys.readouterr().out
