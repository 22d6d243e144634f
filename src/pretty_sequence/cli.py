"""Command line entry point: render, export and normalize diagram files."""

from __future__ import annotations

import json
import logging

import click

from .types import (
    StyleOptions,
    LayoutMetrics,
    DEFAULT_LAYOUT,
    EXPORT_LAYOUT,
    LIFELINE_DASHES,
    METRIC_RANGES,
)
from .sequence.parser import parse_sequence_diagram
from .sequence.layout import layout_sequence_diagram
from .sequence.renderer import render_sequence_svg
from .sequence.serialize import diagram_to_json, diagram_to_dsl

log = logging.getLogger(__name__)


def _load_config(path: str | None) -> tuple[StyleOptions, LayoutMetrics | None]:
    """Read saved style/layout settings from a JSON file."""
    if path is None:
        return StyleOptions(), None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Invalid config file {path}: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"Invalid config file {path}: expected a JSON object")
    layout_data = data.get("layout", {})
    if not isinstance(layout_data, dict):
        raise click.ClickException(f"Invalid config file {path}: layout must be a JSON object")
    for name, value in layout_data.items():
        if name not in METRIC_RANGES:
            continue
        low, high = METRIC_RANGES[name]
        # bool is an int subclass but never a valid metric
        if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
            raise click.ClickException(
                f"Invalid config file {path}: layout {name} must be an integer "
                f"in {low}-{high}, got {value!r}"
            )
    try:
        style = StyleOptions.from_dict(data.get("style", {}))
        layout = LayoutMetrics.from_dict(data["layout"]) if "layout" in data else None
    except (TypeError, AttributeError) as e:
        raise click.ClickException(f"Invalid config file {path}: {e}")
    log.debug("Loaded config from %s: %s", path, json.dumps(data))
    return style, layout


def _metric_option(name: str, help_text: str):
    low, high = METRIC_RANGES[name]
    return click.option(
        f"--{name.replace('_', '-')}",
        name,
        type=click.IntRange(low, high),
        default=None,
        help=f"{help_text} ({low}-{high}).",
    )


@click.group()
@click.option("--debug", default=False, is_flag=True, help="Enable debug.")
def cli(debug):
    """Render numbered sequence diagrams."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        handlers=[logging.StreamHandler()],
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", type=click.File("w", encoding="utf-8"), default="-", help="Output file.")
@click.option("--config", type=click.Path(exists=True, dir_okay=False), default=None, help="JSON settings file.")
@click.option("--export", "export_preset", is_flag=True, help="Start from the export layout preset.")
@click.option("--colored-lines/--plain-lines", default=None, help="Color lifelines and arrows.")
@click.option("--colored-numbers/--plain-numbers", default=None, help="Draw step numbers in colored circles.")
@click.option("--colored-text/--plain-text", default=None, help="Draw labels on colored pills.")
@click.option("--font", default=None, help="Font family.")
@click.option("--lifeline-dash", type=click.Choice(sorted(LIFELINE_DASHES)), default=None, help="Lifeline style.")
@_metric_option("step_height", "Row height")
@_metric_option("box_width", "Participant box width")
@_metric_option("spacing", "Column spacing")
@_metric_option("text_size", "Label font size")
@_metric_option("margin", "Outer margin")
def render(source, output, config, export_preset, **overrides):
    """Render a diagram file to SVG."""
    style, layout = _load_config(config)
    if export_preset:
        layout = EXPORT_LAYOUT
    layout = (layout or DEFAULT_LAYOUT).updated(
        **{name: overrides.pop(name) for name in METRIC_RANGES}
    )
    style = StyleOptions.from_dict(
        {**style.to_dict(), **{k: v for k, v in overrides.items() if v is not None}}
    )

    diagram = parse_sequence_diagram(source.read())
    positioned = layout_sequence_diagram(diagram, style, layout)
    svg = render_sequence_svg(positioned, style)
    if not svg:
        log.warning("Diagram has no participants, nothing to render")
        return
    output.write(svg)
    output.write("\n")


@cli.command("json")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", type=click.File("w", encoding="utf-8"), default="-", help="Output file.")
def export_json(source, output):
    """Export the parsed diagram model as JSON."""
    diagram = parse_sequence_diagram(source.read())
    output.write(diagram_to_json(diagram))
    output.write("\n")


@cli.command("fmt")
@click.argument("source", type=click.File("r", encoding="utf-8"))
@click.option("-o", "--output", type=click.File("w", encoding="utf-8"), default="-", help="Output file.")
def fmt_source(source, output):
    """Rewrite a diagram file in normalized form."""
    diagram = parse_sequence_diagram(source.read())
    output.write(diagram_to_dsl(diagram))


if __name__ == "__main__":
    cli()
