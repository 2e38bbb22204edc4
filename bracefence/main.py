"""
bracefence — CLI entrypoint.

Usage:
    python -m bracefence.main --help
    python -m bracefence.main sanitize README.md
    python -m bracefence.main docs prepare
    python -m bracefence.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from bracefence import __version__
from bracefence.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from bracefence.ui.cli.helpers import load_ctx_config, read_source, write_output


@click.group()
@click.version_option(version=__version__, prog_name="bracefence")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to bracefence.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """bracefence — fence literal braces off from doc link resolvers."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


# ── Single-file transforms ──────────────────────────────────────


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--output", "-o", type=click.Path(), default=None, help="Write here instead of stdout.")
@click.pass_context
def sanitize(ctx: click.Context, source: str, output: str | None) -> None:
    """Swap risky ASCII braces in SOURCE for fullwidth ones ('-' for stdin)."""
    from bracefence.core.services.staging import codec_for

    cfg = load_ctx_config(ctx)
    write_output(codec_for(cfg).sanitize(read_source(source)), output)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--output", "-o", type=click.Path(), default=None, help="Write here instead of stdout.")
def restore(source: str, output: str | None) -> None:
    """Turn fullwidth braces in SOURCE back into ASCII ('-' for stdin)."""
    from bracefence.core.services.brace_fence import restore as restore_text

    write_output(restore_text(read_source(source)), output)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option("--output", "-o", type=click.Path(), default=None, help="Write HTML here instead of stdout.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output render summary as JSON.")
@click.pass_context
def render(ctx: click.Context, source: str, output: str | None, as_json: bool) -> None:
    """Render Markdown to HTML, retrying unexpanded fences with the fallback renderer."""
    from bracefence.core.services.render_fallback import (
        RenderError,
        command_renderer,
        render_with_fallback,
    )

    cfg = load_ctx_config(ctx)
    fb = cfg.fallback
    text = read_source(source)

    try:
        primary = command_renderer(fb.primary)
        fallback = command_renderer(fb.fallback) if fb.fallback else None
        result = render_with_fallback(
            text, primary, fallback, enabled=fb.enabled,
        )
    except RenderError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        if output:
            write_output(result.html, output)
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    write_output(result.html, output)
    if output and not ctx.obj.get("quiet"):
        label = " (fallback renderer)" if result.used_fallback else ""
        click.secho(f"✅ Rendered: {output}{label}", fg="green", err=True)


# ── Config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate bracefence.yml configuration."""
    from bracefence.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)
        return

    if result.valid and result.config is not None:
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        if result.config_path:
            click.echo(f"   File: {result.config_path}")
        click.echo(f"   Staging: {result.config.staging_dir}")
        click.echo(f"   Docs: {result.config.docs_dir}")
        click.echo(f"   Patterns: {', '.join(result.config.patterns) or '(none)'}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register sub-command groups from bracefence/ui/cli/ ─────────

from bracefence.ui.cli.docs import docs  # noqa: E402

cli.add_command(docs)


if __name__ == "__main__":
    cli()
