"""Command-line interface for chartforge.

This module uses the :mod:`click` library to expose a few commands
around the library:

* ``render`` draws a declarative JSON config (ECharts dialect) to a file;
* ``patterns`` scans a CSV of OHLC bars for candlestick patterns;
* ``themes`` lists the registered palettes.

Library errors are reported as :class:`click.ClickException` so the
process exits with status 1 and a one-line message instead of a
traceback.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

import click
import pandas as pd

from .charts import render as render_chart
from .config import FORMAT_JPG, FORMAT_PNG, FORMAT_SVG
from .echarts import parse_echarts_options
from .errors import ChartError
from .features.ohlc import ohlc_from_dataframe
from .features.patterns import PRESETS, PRESET_ALL, CandlestickPatternConfig, scan_for_candlestick_patterns
from .theme import THEMES, get_theme, theme_names

logger = logging.getLogger(__name__)

_SUFFIX_FORMATS = {
    ".svg": FORMAT_SVG,
    ".png": FORMAT_PNG,
    ".jpg": FORMAT_JPG,
    ".jpeg": FORMAT_JPG,
}
# Columns printed next to the row number when a bars file has one
_LABEL_COLUMNS = ("date", "datetime", "time", "timestamp", "ts")


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """chartforge command-line interface."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def _output_format(out: str, output_format: Optional[str]) -> Optional[str]:
    """Format from ``--format`` or else from the suffix of *out*.

    Returns None when neither names a format so the config decides.
    """
    if output_format:
        return output_format.lower()
    return _SUFFIX_FORMATS.get(Path(out).suffix.lower())


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "-o", "out", required=True, type=str, help="File to write the chart to.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice([FORMAT_SVG, FORMAT_PNG, FORMAT_JPG], case_sensitive=False),
    default=None,
    help="Output format (default: from the output file suffix, then the config).",
)
@click.option("--width", type=click.IntRange(min=1), default=None, help="Canvas width in pixels.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Canvas height in pixels.")
@click.option(
    "--theme",
    "theme_name",
    type=click.Choice(theme_names(), case_sensitive=False),
    default=None,
    help="Theme overriding the one in the config.",
)
def render(
    config: str,
    out: str,
    output_format: Optional[str],
    width: Optional[int],
    height: Optional[int],
    theme_name: Optional[str],
) -> None:
    """Render the JSON chart CONFIG to a file.

    CONFIG uses the ECharts option dialect (``title``, ``xAxis``,
    ``yAxis``, ``series`` ...).  Command-line flags override the values
    found in the file.
    """
    overrides = {}
    fmt = _output_format(out, output_format)
    if fmt is not None:
        overrides["output_format"] = fmt
    if width is not None:
        overrides["width"] = width
    if height is not None:
        overrides["height"] = height
    if theme_name is not None:
        overrides["theme"] = get_theme(theme_name)
    try:
        opt = parse_echarts_options(Path(config).read_text(encoding="utf-8"))
        if overrides:
            opt = opt.model_copy(update=overrides)
        painter = render_chart(opt)
        painter.save(out)
    except ChartError as exc:
        raise click.ClickException(str(exc)) from exc
    logger.debug("rendered %s as %s", config, opt.output_format)
    click.echo(f"WROTE {out} ({opt.output_format}, {opt.width}x{opt.height})")


@cli.command()
@click.argument("bars", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--pattern",
    "patterns",
    multiple=True,
    help="Pattern identifier to detect (repeatable), e.g. hammer or engulfing_bull.",
)
@click.option(
    "--preset",
    "presets",
    multiple=True,
    type=click.Choice(sorted(PRESETS), case_sensitive=False),
    help=f"Pattern preset to detect (repeatable; default: {PRESET_ALL} when no --pattern is given).",
)
def patterns(bars: str, patterns: Tuple[str, ...], presets: Tuple[str, ...]) -> None:
    """Print the candlestick patterns found in the CSV file BARS.

    BARS needs ``open``, ``high``, ``low`` and ``close`` columns; a
    ``date``/``timestamp`` column, when present, is printed with each row.
    """
    if not patterns and not presets:
        presets = (PRESET_ALL,)
    config = CandlestickPatternConfig()
    for name in presets:
        config = config.with_preset(name)
    config = config.with_patterns(*patterns)

    try:
        frame = pd.read_csv(bars)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"could not read {bars}: {exc}") from exc
    try:
        samples = ohlc_from_dataframe(frame)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    columns = {str(c).lower(): c for c in frame.columns}
    label_column = next((columns[name] for name in _LABEL_COLUMNS if name in columns), None)
    hits = scan_for_candlestick_patterns(samples, config)
    for index, found in hits.items():
        names = ", ".join(result.pattern_name for result in found)
        if label_column is not None:
            click.echo(f"{index}\t{frame[label_column].iloc[index]}\t{names}")
        else:
            click.echo(f"{index}\t{names}")
    click.echo(f"{len(hits)} of {len(samples)} bars matched")


@cli.command()
def themes() -> None:
    """List the registered themes."""
    for name, theme in THEMES.items():
        click.echo(f"{name}\t{'dark' if theme.is_dark else 'light'}")


__all__ = ["cli"]
