"""CLI entry point for swagger2blocks."""

import logging
from pathlib import Path

import click

from swagger2blocks.aggregator import ModelAggregator
from swagger2blocks.config import GeneratorConfig, load_config
from swagger2blocks.errors import ConfigError
from swagger2blocks.registry import SourceRegistry, regenerate


def _parse_sources(values: tuple[str, ...]) -> dict[str, str]:
    """Parse repeated KEY=LOCATION options, keeping their order."""
    sources = {}
    for value in values:
        key, sep, location = value.partition("=")
        if not sep or not key.strip() or not location.strip():
            raise click.BadParameter(f"expected KEY=LOCATION, got {value!r}", param_hint="--source")
        sources[key.strip()] = location.strip()
    return sources


def _build_config(config_path: Path | None, sources: tuple[str, ...], timeout: float | None) -> GeneratorConfig:
    try:
        config = load_config(config_path) if config_path else GeneratorConfig()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    config.sources.update(_parse_sources(sources))
    if timeout is not None:
        config.timeout = timeout
    if not config.sources:
        raise click.UsageError("No sources given. Use --config or --source KEY=LOCATION.")
    return config


def _report_failures(registry: SourceRegistry) -> None:
    for key in registry.failed_keys():
        click.echo(f"Source {key} unavailable: {registry.failure(key)}", err=True)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log per-operation detail.")
def main(verbose: bool):
    """Discover API descriptions and build block models from them."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, path_type=Path), help="YAML file listing sources.")
@click.option("-s", "--source", "sources", multiple=True, help="Source as KEY=URL or KEY=PATH. Repeatable.")
@click.option("--timeout", type=float, default=None, help="Fetch timeout in seconds.")
@click.option("--key", default=None, help="Only output this source.")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write the JSON model here instead of stdout.")
def build(config_path: Path | None, sources: tuple[str, ...], timeout: float | None, key: str | None, output: Path | None):
    """Build the action/type model of every source as JSON."""
    config = _build_config(config_path, sources, timeout)
    registry = regenerate(config)
    _report_failures(registry)

    snapshot = ModelAggregator(registry).snapshot(key)
    text = snapshot.model_dump_json(indent=2)
    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Model with {len(snapshot.actions)} actions saved to {output}")


@main.command()
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, path_type=Path), help="YAML file listing sources.")
@click.option("-s", "--source", "sources", multiple=True, help="Source as KEY=URL or KEY=PATH. Repeatable.")
@click.option("--timeout", type=float, default=None, help="Fetch timeout in seconds.")
def keys(config_path: Path | None, sources: tuple[str, ...], timeout: float | None):
    """List registered and failed source keys."""
    config = _build_config(config_path, sources, timeout)
    registry = regenerate(config)
    for key in registry.keys():
        click.echo(f"{key}\t{registry.get(key).site}")
    _report_failures(registry)
