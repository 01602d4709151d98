"""Tests for small helpers: size formatting, settings, schemas."""

import pytest

from schemas import AssetResult, OptimizationOptions, OptimizationOutcome, RunSummary
from utils.formatting import format_size


@pytest.mark.parametrize(
    "n,expected",
    [(0, "0B"), (1023, "1023B"), (1024, "1.0KB"), (40_000, "39.1KB"), (5 * 1_048_576, "5.0MB")],
)
def test_format_size(n, expected):
    assert format_size(n) == expected


def test_options_defaults():
    options = OptimizationOptions()
    assert options.quality == 80
    assert not options.save
    assert not options.has_filters


def test_options_default_quality_from_settings(monkeypatch):
    from config import settings

    monkeypatch.setattr(settings, "default_quality", 65)
    assert OptimizationOptions().quality == 65


def test_settings_from_env(monkeypatch):
    from config import Settings

    monkeypatch.setenv("COMPRESSOR", "pillow")
    monkeypatch.setenv("TOOL_TIMEOUT_SECONDS", "30")
    s = Settings()
    assert s.compressor == "pillow"
    assert s.tool_timeout_seconds == 30
    assert s.state_dir_name == ".expo-shared"


def test_run_summary_totals():
    summary = RunSummary(
        results=[
            AssetResult(path="a.png", outcome=OptimizationOutcome.IMPROVED, saved_bytes=500),
            AssetResult(path="b.png", outcome=OptimizationOutcome.NOT_IMPROVED, saved_bytes=-20),
            AssetResult(path="c.png", outcome=OptimizationOutcome.ALREADY_OPTIMIZED),
            AssetResult(path="d.png", outcome=OptimizationOutcome.UNAVAILABLE),
        ]
    )
    assert summary.total_saved == 500
    assert summary.files_checked == 3
    assert summary.files_skipped == 2
    assert summary.count(OptimizationOutcome.IMPROVED) == 1
