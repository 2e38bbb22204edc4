"""
Configuration loader — reads bracefence.yml into a FenceConfig.

Reads YAML, validates against the Pydantic schema, then applies
BRACEFENCE_* environment overrides.  A missing file is not an error:
the defaults describe the usual layout.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import yaml

from bracefence.core.models.config import FenceConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "bracefence.yml"

# Environment toggles
ENV_DISABLE = "BRACEFENCE_DISABLE"
ENV_CLEAN_DOCS = "BRACEFENCE_CLEAN_DOCS"
ENV_DISABLE_FALLBACK = "BRACEFENCE_DISABLE_FALLBACK"

_TRUTHY = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when bracefence configuration is invalid."""


def env_flag(name: str, environ: Mapping[str, str] | None = None) -> bool | None:
    """Read a boolean env var.  Returns None when unset or empty."""
    env = os.environ if environ is None else environ
    raw = env.get(name, "").strip()
    if not raw:
        return None
    return raw.lower() in _TRUTHY


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for bracefence.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to bracefence.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> FenceConfig:
    """Load and validate bracefence configuration.

    Args:
        path: Explicit path to bracefence.yml. If None, searches upward;
            if nothing is found, defaults are used.
        environ: Environment mapping for overrides (default: os.environ).

    Returns:
        Validated FenceConfig with environment overrides applied.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            logger.debug("No %s found — using defaults", CONFIG_FILE)
            return apply_env_overrides(FenceConfig(), environ)

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "bracefence" key or be flat
    fence_data = data.get("bracefence", data)
    if fence_data is None:
        fence_data = {}

    try:
        config = FenceConfig.model_validate(fence_data)
    except Exception as e:
        raise ConfigError(f"Invalid bracefence configuration: {e}") from e

    logger.info("Loaded config from %s (staging=%s, docs=%s)", path, config.staging_dir, config.docs_dir)
    return apply_env_overrides(config, environ)


def apply_env_overrides(
    config: FenceConfig,
    environ: Mapping[str, str] | None = None,
) -> FenceConfig:
    """Return a copy of ``config`` with BRACEFENCE_* toggles applied."""
    updates: dict = {}

    disabled = env_flag(ENV_DISABLE, environ)
    if disabled is not None:
        updates["disabled"] = disabled

    clean = env_flag(ENV_CLEAN_DOCS, environ)
    if clean is not None:
        updates["clean_docs"] = clean

    no_fallback = env_flag(ENV_DISABLE_FALLBACK, environ)
    if no_fallback is not None:
        updates["fallback"] = config.fallback.model_copy(
            update={"enabled": not no_fallback}
        )

    if not updates:
        return config
    logger.debug("Environment overrides: %s", ", ".join(sorted(updates)))
    return config.model_copy(update=updates)


def project_root(config_path: Path | None) -> Path:
    """Get the project root directory from a config file path (or cwd)."""
    return config_path.parent.resolve() if config_path else Path.cwd()
