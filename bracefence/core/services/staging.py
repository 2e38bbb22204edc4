"""
Staging — sanitized copies of top-level Markdown/text for the doc generator.

The generator reads the staged copies instead of the originals, so the
sources stay clean on the repo host while the generator never sees a
linkable ``{...}`` in code examples or placeholders.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from bracefence.core.models.config import FenceConfig
from bracefence.core.services.brace_fence import (
    DEFAULT_PLACEHOLDER_CHARS,
    BraceCodec,
    default_codec,
)

logger = logging.getLogger(__name__)


@dataclass
class StagingResult:
    """Outcome of a staging run."""

    staging_dir: Path | None = None
    written: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    docs_cleaned: bool = False
    disabled: bool = False

    def to_dict(self) -> dict:
        return {
            "staging_dir": str(self.staging_dir) if self.staging_dir else None,
            "written": [str(p) for p in self.written],
            "skipped": self.skipped,
            "docs_cleaned": self.docs_cleaned,
            "disabled": self.disabled,
        }


def codec_for(config: FenceConfig) -> BraceCodec:
    """The codec matching the configured placeholder policy."""
    if config.placeholder_chars == DEFAULT_PLACEHOLDER_CHARS:
        return default_codec()
    return BraceCodec(placeholder_chars=config.placeholder_chars)


def find_candidates(root: Path, patterns: list[str]) -> list[Path]:
    """Top-level paths in ``root`` matching any pattern (deduplicated, sorted)."""
    seen: set[Path] = set()
    for pattern in patterns:
        seen.update(root.glob(pattern))
    return sorted(seen)


def prepare_staging_files(root: Path, config: FenceConfig) -> StagingResult:
    """Write sanitized copies of matching top-level files to the staging dir.

    Non-file candidates (e.g. a directory named ``examples.md``) and files
    that are not valid UTF-8 are skipped and listed in ``skipped``.
    """
    result = StagingResult()
    if config.disabled:
        logger.info("Staging disabled — nothing to do")
        result.disabled = True
        return result

    codec = codec_for(config)
    outdir = root / config.staging_dir
    outdir.mkdir(parents=True, exist_ok=True)
    result.staging_dir = outdir

    for src in find_candidates(root, config.patterns):
        if not src.is_file():
            logger.debug("Skipping non-file candidate %s", src.name)
            result.skipped.append(src.name)
            continue

        try:
            content = src.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Skipping %s: not valid UTF-8 (%s)", src.name, e)
            result.skipped.append(src.name)
            continue

        # newline="" keeps CRLF sources byte-for-byte
        dst = outdir / src.name
        dst.write_text(codec.sanitize(content), encoding="utf-8", newline="")
        result.written.append(dst)
        logger.debug("Staged %s → %s", src.name, dst)

    logger.info("Staged %d file(s) into %s", len(result.written), outdir)
    return result


def clean_docs_directory(root: Path, config: FenceConfig) -> bool:
    """Remove the generated docs directory.  Returns True if it existed."""
    docs = root / config.docs_dir
    if not docs.is_dir():
        logger.debug("No docs directory at %s — nothing to clean", docs)
        return False

    shutil.rmtree(docs)
    logger.info("Removed %s", docs)
    return True


def prepare_for_docs(
    root: Path,
    config: FenceConfig,
    clean: bool | None = None,
) -> StagingResult:
    """Clean docs/ (when enabled) and stage sanitized files.

    Args:
        root: Project root holding the source files.
        config: Loaded configuration.
        clean: Override ``config.clean_docs`` when not None.
    """
    if config.disabled:
        return prepare_staging_files(root, config)

    do_clean = config.clean_docs if clean is None else clean
    cleaned = clean_docs_directory(root, config) if do_clean else False

    result = prepare_staging_files(root, config)
    result.docs_cleaned = cleaned
    return result
