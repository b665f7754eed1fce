"""Tests for the chartforge CLI."""

from __future__ import annotations

import json

from click.testing import CliRunner

from chartforge.cli import cli


def _write_config(tmp_path, **extra) -> str:
    doc = {
        "title": {"text": "Visits"},
        "xAxis": {"data": ["Mon", "Tue", "Wed"]},
        "series": [{"type": "line", "data": [120, 132, 101]}],
    }
    doc.update(extra)
    path = tmp_path / "chart.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    return str(path)


def _write_bars(tmp_path, text: str) -> str:
    path = tmp_path / "bars.csv"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_render_infers_format_from_suffix(tmp_path) -> None:
    runner = CliRunner()
    out = tmp_path / "visits.svg"
    result = runner.invoke(cli, ["render", _write_config(tmp_path), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert f"WROTE {out} (svg, 600x400)" in result.output
    assert out.read_text(encoding="utf-8").startswith("<svg")


def test_render_flags_override_config(tmp_path) -> None:
    runner = CliRunner()
    out = tmp_path / "visits.bin"
    result = runner.invoke(
        cli,
        ["render", _write_config(tmp_path, type="svg"), "-o", str(out), "--format", "PNG",
         "--width", "300", "--height", "200", "--theme", "dark"],
    )
    assert result.exit_code == 0, result.output
    assert "(png, 300x200)" in result.output
    assert out.read_bytes().startswith(b"\x89PNG")


def test_render_uses_config_format_without_suffix(tmp_path) -> None:
    runner = CliRunner()
    out = tmp_path / "visits"
    result = runner.invoke(cli, ["render", _write_config(tmp_path, type="svg"), "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert "(svg, " in result.output


def test_render_rejects_unknown_format(tmp_path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["render", _write_config(tmp_path), "-o", "x.gif", "--format", "gif"])
    assert result.exit_code == 2
    assert "gif" in result.output


def test_render_reports_bad_config(tmp_path) -> None:
    """Library errors become a one-line message and exit status 1."""
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(path), "-o", str(tmp_path / "out.svg")])
    assert result.exit_code == 1
    assert "invalid echarts json" in result.output


def test_render_reports_invalid_options(tmp_path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["render", _write_config(tmp_path, series=[]), "-o", str(tmp_path / "out.svg")])
    assert result.exit_code == 1
    assert "empty series list" in result.output


def test_patterns_prints_matches(tmp_path) -> None:
    bars = _write_bars(
        tmp_path,
        "Date,Open,High,Low,Close\n"
        "2025-01-02,10,20,10,20\n"
        "2025-01-03,20,21,19,20.5\n",
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["patterns", bars, "--pattern", "marubozu_bull"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == "0\t2025-01-02\tBullish Marubozu"
    assert lines[-1] == "1 of 2 bars matched"


def test_patterns_with_preset_and_no_label_column(tmp_path) -> None:
    bars = _write_bars(tmp_path, "open,high,low,close\n10,20,10,20\n")
    runner = CliRunner()
    result = runner.invoke(cli, ["patterns", bars, "--preset", "bullish"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines()[0].startswith("0\t")
    assert "Bullish Marubozu" in result.output


def test_patterns_missing_column(tmp_path) -> None:
    bars = _write_bars(tmp_path, "open,high,low\n1,2,0\n")
    runner = CliRunner()
    result = runner.invoke(cli, ["patterns", bars])
    assert result.exit_code == 1
    assert "missing OHLC columns" in result.output


def test_themes_lists_registry() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--verbose", "themes"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "light\tlight"
    assert "dark\tdark" in lines
    assert len(lines) == 6
