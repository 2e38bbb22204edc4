"""
Shared helpers for CLI commands.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from bracefence.core.config.loader import (
    ConfigError,
    find_config_file,
    load_config,
    project_root,
)
from bracefence.core.models.config import FenceConfig


def load_ctx_config(ctx: click.Context) -> FenceConfig:
    """Load the config named by --config (or found upward).

    Prints the error and exits 1 when the config is invalid.
    """
    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def resolve_project_root(ctx: click.Context) -> Path:
    """Resolve project root from the config path or CWD."""
    config_path: Path | None = ctx.obj.get("config_path")
    if config_path is None:
        config_path = find_config_file()
    return project_root(config_path)


def read_source(source: str) -> str:
    """Read a UTF-8 file (or stdin for '-') with line endings untouched.

    Prints the error and exits 1 when the bytes are not valid UTF-8.
    """
    if source == "-":
        raw = click.get_binary_stream("stdin").read()
    else:
        raw = Path(source).read_bytes()

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        click.secho(f"❌ {source} is not valid UTF-8: {e}", fg="red")
        sys.exit(1)


def write_output(text: str, output: str | None) -> None:
    """Write to ``output`` without newline translation, or echo to stdout."""
    if output:
        Path(output).write_text(text, encoding="utf-8", newline="")
    else:
        click.echo(text, nl=False)
