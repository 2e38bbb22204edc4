"""
Tests for configuration loading — bracefence.yml parsing, env overrides, checks.
"""

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from bracefence.core.config.loader import (
    ConfigError,
    apply_env_overrides,
    env_flag,
    find_config_file,
    load_config,
)
from bracefence.core.models.config import FenceConfig
from bracefence.core.services.brace_fence import DEFAULT_PLACEHOLDER_CHARS
from bracefence.core.use_cases.config_check import check_config


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    """Create a full bracefence.yml in a temp directory."""
    content = textwrap.dedent("""\
        staging_dir: build/staged
        docs_dir: site
        patterns:
          - "*.md"
          - "CHANGELOG*"
        placeholder_chars: 'A-Za-z0-9_.'
        clean_docs: true
        fallback:
          enabled: false
          primary: [cmark-gfm]
          fallback: [pandoc, --from, markdown]
    """)
    path = tmp_path / "bracefence.yml"
    path.write_text(content)
    return path


@pytest.fixture
def wrapped_config_yml(tmp_path: Path) -> Path:
    """Create a bracefence.yml with content under a 'bracefence:' key."""
    content = textwrap.dedent("""\
        bracefence:
          docs_dir: public
        unrelated: true
    """)
    path = tmp_path / "bracefence.yml"
    path.write_text(content)
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_load_valid_config(self, valid_config_yml: Path):
        config = load_config(valid_config_yml, environ={})
        assert config.staging_dir == "build/staged"
        assert config.docs_dir == "site"
        assert config.patterns == ["*.md", "CHANGELOG*"]
        assert config.placeholder_chars == "A-Za-z0-9_."
        assert config.clean_docs is True
        assert config.fallback.enabled is False
        assert config.fallback.primary == ["cmark-gfm"]

    def test_load_wrapped_format(self, wrapped_config_yml: Path):
        config = load_config(wrapped_config_yml, environ={})
        assert config.docs_dir == "public"
        assert config.staging_dir == "tmp/bracefence"

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("")
        config = load_config(path, environ={})
        assert config == FenceConfig()

    def test_defaults(self):
        config = FenceConfig()
        assert config.staging_dir == "tmp/bracefence"
        assert config.docs_dir == "docs"
        assert config.patterns == ["*.md", "*.MD", "*.txt", "*.TXT"]
        assert config.placeholder_chars == DEFAULT_PLACEHOLDER_CHARS
        assert config.clean_docs is False
        assert config.fallback.enabled is True

    def test_no_file_anywhere_gives_defaults(self, project_dir: Path):
        assert load_config(environ={}) == FenceConfig()

    def test_explicit_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("patterns: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="Expected a YAML mapping"):
            load_config(path)

    def test_schema_violation(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("patterns: 5\n")
        with pytest.raises(ConfigError, match="Invalid bracefence configuration"):
            load_config(path)

    def test_bad_placeholder_chars(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("placeholder_chars: 'z-a'\n")
        with pytest.raises(ConfigError, match="placeholder_chars"):
            load_config(path)

    def test_model_rejects_bad_placeholder_chars(self):
        with pytest.raises(ValidationError, match="Invalid placeholder character class"):
            FenceConfig(placeholder_chars="z-a")

    def test_env_applied_after_file(self, valid_config_yml: Path):
        config = load_config(valid_config_yml, environ={"BRACEFENCE_CLEAN_DOCS": "false"})
        assert config.clean_docs is False


class TestFindConfigFile:
    def test_finds_in_current_dir(self, tmp_path: Path):
        (tmp_path / "bracefence.yml").write_text("docs_dir: docs\n")
        assert find_config_file(tmp_path) == (tmp_path / "bracefence.yml").resolve()

    def test_walks_up(self, tmp_path: Path):
        (tmp_path / "bracefence.yml").write_text("docs_dir: docs\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / "bracefence.yml").resolve()


class TestEnvOverrides:
    @pytest.mark.parametrize(
        "raw, expected",
        [("true", True), ("TRUE", True), ("1", True), ("yes", True),
         ("false", False), ("0", False), ("", None)],
    )
    def test_env_flag(self, raw: str, expected):
        assert env_flag("X", {"X": raw}) is expected

    def test_env_flag_unset(self):
        assert env_flag("X", {}) is None

    def test_disable(self):
        config = apply_env_overrides(FenceConfig(), {"BRACEFENCE_DISABLE": "true"})
        assert config.disabled is True

    def test_clean_docs(self):
        config = apply_env_overrides(FenceConfig(), {"BRACEFENCE_CLEAN_DOCS": "1"})
        assert config.clean_docs is True

    def test_disable_fallback(self):
        config = apply_env_overrides(FenceConfig(), {"BRACEFENCE_DISABLE_FALLBACK": "1"})
        assert config.fallback.enabled is False
        assert config.fallback.primary == FenceConfig().fallback.primary

    def test_no_overrides_returns_same_object(self):
        config = FenceConfig()
        assert apply_env_overrides(config, {}) is config


class TestCheckConfig:
    def test_valid(self, valid_config_yml: Path, monkeypatch):
        monkeypatch.delenv("BRACEFENCE_DISABLE", raising=False)
        result = check_config(valid_config_yml)
        assert result.valid is True
        assert result.errors == []
        assert result.to_dict()["config"]["docs_dir"] == "site"

    def test_missing_file_uses_defaults(self, project_dir: Path):
        result = check_config()
        assert result.valid is True
        assert any("No bracefence.yml" in w for w in result.warnings)

    def test_same_staging_and_docs(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("staging_dir: docs\ndocs_dir: docs/\n")
        result = check_config(path)
        assert result.valid is False
        assert any("must differ" in e for e in result.errors)

    def test_bad_placeholder_class(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("placeholder_chars: 'z-a'\n")
        result = check_config(path)
        assert result.valid is False
        assert any("placeholder_chars" in e for e in result.errors)

    def test_no_patterns_warns(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("patterns: []\n")
        result = check_config(path)
        assert result.valid is True
        assert any("No file patterns" in w for w in result.warnings)

    def test_fallback_without_primary(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("fallback:\n  primary: []\n")
        result = check_config(path)
        assert result.valid is False

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "bracefence.yml"
        path.write_text("- nope\n")
        result = check_config(path)
        assert result.valid is False
        assert result.config is None
