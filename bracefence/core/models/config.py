"""
Fence config model — loaded from bracefence.yml.

Every field has a default, so a project without a config file gets
the standard layout: stage top-level Markdown/text into tmp/bracefence,
post-process HTML under docs/.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from bracefence.core.services.brace_fence import (
    DEFAULT_PLACEHOLDER_CHARS,
    BraceCodec,
    FenceError,
)


class FallbackConfig(BaseModel):
    """Renderer commands for the fenced-code fallback gate.

    Each command reads Markdown on stdin and writes HTML on stdout.
    """

    enabled: bool = True
    primary: list[str] = Field(
        default_factory=lambda: ["pandoc", "--from", "gfm", "--to", "html"]
    )
    fallback: list[str] = Field(
        default_factory=lambda: ["pandoc", "--from", "markdown", "--to", "html"]
    )


class FenceConfig(BaseModel):
    """Staging and post-processing settings."""

    staging_dir: str = "tmp/bracefence"
    docs_dir: str = "docs"
    patterns: list[str] = Field(
        default_factory=lambda: ["*.md", "*.MD", "*.txt", "*.TXT"]
    )
    placeholder_chars: str = DEFAULT_PLACEHOLDER_CHARS
    clean_docs: bool = False
    disabled: bool = False
    fallback: FallbackConfig = Field(default_factory=FallbackConfig)

    @field_validator("placeholder_chars")
    @classmethod
    def _placeholder_chars_compile(cls, v: str) -> str:
        try:
            BraceCodec(placeholder_chars=v)
        except FenceError as e:
            raise ValueError(str(e)) from e
        return v
