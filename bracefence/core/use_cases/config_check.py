"""
Config check use case — validate bracefence.yml and report issues.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bracefence.core.config.loader import ConfigError, find_config_file, load_config
from bracefence.core.models.config import FenceConfig


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    config: FenceConfig | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "config": self.config.model_dump() if self.config else None,
        }


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate bracefence configuration and report issues.

    Args:
        config_path: Optional explicit path to bracefence.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            result.warnings.append("No bracefence.yml found — using defaults.")

    result.config_path = config_path

    try:
        config = load_config(config_path)
        result.config = config
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if Path(config.staging_dir) == Path(config.docs_dir):
        result.errors.append(
            f"staging_dir and docs_dir must differ (both are {config.staging_dir!r})"
        )

    if not config.patterns:
        result.warnings.append("No file patterns configured. Nothing will be staged.")

    if config.disabled:
        result.warnings.append("Staging and post-processing are disabled (BRACEFENCE_DISABLE).")

    if config.fallback.enabled and not config.fallback.primary:
        result.errors.append("fallback.primary must name a renderer command.")

    result.valid = len(result.errors) == 0
    return result
