"""Click CLI with collect, analyze, and contributions subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from reftrim import __version__
from reftrim.cache import resolve_target
from reftrim.collector import CollectionInputs, collect_declared_references
from reftrim.config import load_config
from reftrim.errors import InputMissingError, ReftrimError
from reftrim.lockfile import load_lock_manifest
from reftrim.models import AnalysisRequest, TargetSelector
from reftrim.pipeline import analyze_module
from reftrim.store import DECLARED_REFERENCES_FILE_NAME, save_declared_references

_EXISTING_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _target(framework: str | None, runtime: str | None) -> TargetSelector | None:
    if not framework:
        return None
    return TargetSelector(framework=framework, runtime_identifier=runtime)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Log skipped items and other details")
@click.option("--config", "config_path", type=_EXISTING_FILE, help="YAML config file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None):
    """reftrim: find declared references a module does not need."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument("items_file", type=_EXISTING_FILE)
@click.option("--assets", "assets_path", type=_EXISTING_FILE, help="Lock manifest (project.assets.json)")
@click.option("--framework", "-f", help="Target framework in the lock manifest")
@click.option("--runtime", "-r", help="Runtime identifier")
@click.option(
    "-o", "--output", "output_path", type=click.Path(path_type=Path),
    default=DECLARED_REFERENCES_FILE_NAME, help="Declared references file to write",
)
@click.pass_context
def collect(
    ctx: click.Context,
    items_file: Path,
    assets_path: Path | None,
    framework: str | None,
    runtime: str | None,
    output_path: Path,
):
    """Collect declared references from an items JSON file."""
    config = ctx.obj["config"]
    try:
        inputs = CollectionInputs.load(items_file)
        contributions = None
        if assets_path is not None:
            selector = _target(framework, runtime)
            if selector is None:
                raise click.UsageError("--framework is required with --assets")
            resolved = resolve_target(
                load_lock_manifest(assets_path), selector, config.ignore_package_build_files,
            )
            contributions = resolved.contributions
        records = collect_declared_references(inputs, contributions)
        written = save_declared_references(records, output_path)
    except ReftrimError as e:
        raise click.ClickException(str(e))

    state = "written" if written else "unchanged"
    click.echo(f"{len(records)} declared reference(s) -> {output_path} ({state})")


@cli.command()
@click.argument("declared_file", type=click.Path(path_type=Path))
@click.option("--used", "used_path", type=click.Path(path_type=Path), required=True, help="Used module report")
@click.option("--assets", "assets_path", type=click.Path(path_type=Path), help="Lock manifest (project.assets.json)")
@click.option("--framework", "-f", help="Target framework in the lock manifest")
@click.option("--runtime", "-r", help="Runtime identifier")
@click.option("--module", "module_name", default=None, help="Module name used in output")
@click.option("--no-doc", is_flag=True, help="Documentation generation is disabled for the module")
@click.option("--json", "as_json", is_flag=True, help="Emit diagnostics as JSON")
@click.pass_context
def analyze(
    ctx: click.Context,
    declared_file: Path,
    used_path: Path,
    assets_path: Path | None,
    framework: str | None,
    runtime: str | None,
    module_name: str | None,
    no_doc: bool,
    as_json: bool,
):
    """Report declared references that can be removed."""
    request = AnalysisRequest(
        module=module_name or declared_file.parent.name or str(declared_file),
        declared_references_path=declared_file,
        used_modules_path=used_path,
        assets_path=assets_path,
        target=_target(framework, runtime),
        doc_generation_enabled=not no_doc,
    )
    try:
        result = analyze_module(request, ctx.obj["config"])
    except InputMissingError as e:
        raise click.ClickException(f"{e} (run restore/build first)")
    except ReftrimError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in result.diagnostics], indent=2))
        return

    if not result.diagnostics:
        click.echo("No removable references found.")
        return

    for diagnostic in result.diagnostics:
        click.echo(f"{click.style('warning', fg='yellow')} {diagnostic.format()} [{result.module}]")


@cli.command()
@click.argument("assets_path", type=_EXISTING_FILE)
@click.option("--framework", "-f", required=True, help="Target framework in the lock manifest")
@click.option("--runtime", "-r", help="Runtime identifier")
@click.pass_context
def contributions(ctx: click.Context, assets_path: Path, framework: str, runtime: str | None):
    """List the modules each package makes available, including via its dependencies."""
    config = ctx.obj["config"]
    try:
        resolved = resolve_target(
            load_lock_manifest(assets_path), _target(framework, runtime), config.ignore_package_build_files,
        )
    except ReftrimError as e:
        raise click.ClickException(str(e))

    graph = resolved.graph
    for key, package in sorted(graph.packages.items()):
        modules = resolved.contributions.modules_for(key)
        click.echo(click.style(f"{package.id} {package.version}", fg="cyan"))
        for module in modules:
            marker = "" if module in package.contributed_modules else click.style(" (transitive)", dim=True)
            click.echo(f"  {module}{marker}")
        if not modules:
            click.echo(click.style("  (no compile-time modules)", dim=True))


if __name__ == "__main__":
    cli()
