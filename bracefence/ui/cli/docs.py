"""
CLI commands for the doc build around the generator.

Thin wrappers over ``bracefence.core.services.staging``
and ``bracefence.core.services.html_restore``.  Run ``docs prepare``
before the doc generator and ``docs postprocess`` after it.
"""

from __future__ import annotations

import json

import click

from bracefence.ui.cli.helpers import load_ctx_config, resolve_project_root


@click.group("docs")
def docs() -> None:
    """Docs — stage sanitized sources and post-process generated HTML."""


@docs.command("prepare")
@click.option(
    "--clean/--no-clean",
    default=None,
    help="Remove the docs directory first (default: clean_docs / BRACEFENCE_CLEAN_DOCS).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def prepare(ctx: click.Context, clean: bool | None, as_json: bool) -> None:
    """Write sanitized copies of top-level Markdown/text files to the staging dir."""
    from bracefence.core.services.staging import prepare_for_docs

    cfg = load_ctx_config(ctx)
    project_root = resolve_project_root(ctx)
    result = prepare_for_docs(project_root, cfg, clean=clean)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.disabled:
        click.secho("⊘ Staging disabled (BRACEFENCE_DISABLE)", fg="yellow")
        return

    if result.docs_cleaned:
        click.secho(f"🧹 Cleaned {cfg.docs_dir}/", fg="cyan")

    click.secho(
        f"✅ Staged {len(result.written)} file(s) → {result.staging_dir}",
        fg="green",
        bold=True,
    )
    if ctx.obj.get("verbose"):
        for path in result.written:
            click.echo(f"   • {path.name}")
    for name in result.skipped:
        click.secho(f"   ⊘ {name} (skipped)", fg="yellow")


@docs.command("clean")
@click.pass_context
def clean(ctx: click.Context) -> None:
    """Remove the generated docs directory only."""
    from bracefence.core.services.staging import clean_docs_directory

    cfg = load_ctx_config(ctx)
    project_root = resolve_project_root(ctx)

    if clean_docs_directory(project_root, cfg):
        click.secho(f"🧹 Removed {cfg.docs_dir}/", fg="green")
    else:
        click.echo(f"   Nothing to clean ({cfg.docs_dir}/ not found)")


@docs.command("postprocess")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def postprocess(ctx: click.Context, as_json: bool) -> None:
    """Restore ASCII braces in every generated HTML file."""
    from bracefence.core.services.html_restore import postprocess_html_docs

    cfg = load_ctx_config(ctx)
    project_root = resolve_project_root(ctx)
    result = postprocess_html_docs(project_root, cfg)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    if result.disabled:
        click.secho("⊘ Post-processing disabled (BRACEFENCE_DISABLE)", fg="yellow")
        return

    if result.docs_dir is None:
        click.echo(f"   No {cfg.docs_dir}/ directory — nothing to post-process")
        return

    if result.error:
        click.secho(f"⚠️  Post-processing stopped early: {result.error}", fg="yellow")

    click.secho(
        f"✅ Restored braces in {len(result.changed)}/{result.scanned} HTML file(s)",
        fg="green",
        bold=True,
    )
