"""
HTML post-processing — put ASCII braces back into rendered docs.

Runs after the doc generator has written its HTML, so code copied from
the published pages has normal ``{`` and ``}``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bracefence.core.models.config import FenceConfig
from bracefence.core.services.brace_fence import restore

logger = logging.getLogger(__name__)


@dataclass
class PostprocessResult:
    """Outcome of an HTML post-processing run."""

    docs_dir: Path | None = None
    scanned: int = 0
    changed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    error: str | None = None
    disabled: bool = False

    def to_dict(self) -> dict:
        return {
            "docs_dir": str(self.docs_dir) if self.docs_dir else None,
            "scanned": self.scanned,
            "changed": [str(p) for p in self.changed],
            "skipped": [str(p) for p in self.skipped],
            "error": self.error,
            "disabled": self.disabled,
        }


def restore_html_file(path: Path) -> bool:
    """Restore ASCII braces in one file.  Returns True if it changed.

    A missing path is a no-op.  Line endings are kept as they are.
    """
    if not path.is_file():
        return False

    content = path.read_bytes().decode("utf-8")
    restored = restore(content)
    if restored == content:
        return False

    path.write_text(restored, encoding="utf-8", newline="")
    return True


def postprocess_html_docs(root: Path, config: FenceConfig) -> PostprocessResult:
    """Restore ASCII braces in every ``*.html`` under the docs directory."""
    result = PostprocessResult()
    if config.disabled:
        result.disabled = True
        return result

    docs = root / config.docs_dir
    if not docs.is_dir():
        logger.debug("No docs directory at %s — skipping post-processing", docs)
        return result

    result.docs_dir = docs
    try:
        for html in sorted(docs.rglob("*.html")):
            result.scanned += 1
            try:
                changed = restore_html_file(html)
            except UnicodeDecodeError as e:
                logger.warning("Skipping %s: not valid UTF-8 (%s)", html, e)
                result.skipped.append(html)
                continue
            if changed:
                result.changed.append(html)
    except OSError as e:
        logger.warning("HTML post-processing failed: %s: %s", type(e).__name__, e)
        result.error = f"{type(e).__name__}: {e}"

    logger.info(
        "Post-processed %d HTML file(s) in %s (%d changed)",
        result.scanned, docs, len(result.changed),
    )
    return result
