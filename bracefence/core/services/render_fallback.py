"""
Render fallback — second chance for fenced code a GFM renderer left raw.

Some GFM renderers leave a fenced block inside ``<details markdown="1">``
as literal backticks (``<p>```ruby ...</p>``).  When that happens the
same source is rendered again with a fallback renderer, and the fallback
HTML is kept only if it actually produced a code block.

Renderers are plain callables ``(markdown) -> html`` passed in by the
caller.  ``command_renderer`` builds one from an external command.
"""

from __future__ import annotations

import logging
import re
import subprocess
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

Renderer = Callable[[str], str]

UNRENDERED_FENCE_PARAGRAPH = re.compile(r"<p>```")
DETAILS_MARKDOWN_1 = re.compile(r"""<details[^>]*markdown=["']1["'][^>]*>""", re.IGNORECASE)


class RenderError(Exception):
    """Raised when an external renderer cannot produce HTML."""


@dataclass
class RenderResult:
    """HTML plus which renderer produced it."""

    html: str
    used_fallback: bool = False
    fallback_attempted: bool = False

    def to_dict(self) -> dict:
        return {
            "used_fallback": self.used_fallback,
            "fallback_attempted": self.fallback_attempted,
            "length": len(self.html),
        }


def _has_code_block(html: str) -> bool:
    return "<pre" in html and "<code" in html


def needs_fallback(source: str, html: str) -> bool:
    """Did the primary render leave a fence unexpanded?"""
    # Raw fence rendered as a paragraph
    if UNRENDERED_FENCE_PARAGRAPH.search(html):
        return True
    # details wrapper in the source but no code block in the output
    if DETAILS_MARKDOWN_1.search(source):
        return not _has_code_block(html)
    return False


def fallback_improved(html: str) -> bool:
    """True only when no raw fence remains and a real code block exists."""
    return not UNRENDERED_FENCE_PARAGRAPH.search(html) and _has_code_block(html)


def render_with_fallback(
    source: str,
    primary: Renderer,
    fallback: Renderer | None = None,
    enabled: bool = True,
) -> RenderResult:
    """Render ``source`` with ``primary``; retry with ``fallback`` if needed.

    The fallback output is adopted only when ``fallback_improved`` holds;
    otherwise the primary HTML is returned untouched.
    """
    html = primary(source)
    if not enabled or fallback is None:
        return RenderResult(html=html)
    if "```" not in source:
        return RenderResult(html=html)
    if not needs_fallback(source, html):
        return RenderResult(html=html)

    logger.info("Primary render left fenced code unexpanded — trying fallback")
    fb_html = fallback(source)
    if fallback_improved(fb_html):
        logger.debug("Fallback render adopted")
        return RenderResult(html=fb_html, used_fallback=True, fallback_attempted=True)

    logger.debug("Fallback render was no better — keeping primary output")
    return RenderResult(html=html, fallback_attempted=True)


def command_renderer(cmd: list[str], timeout: int = 60) -> Renderer:
    """Wrap an external command (Markdown on stdin, HTML on stdout)."""
    if not cmd:
        raise RenderError("Renderer command is empty")

    def _render(source: str) -> str:
        try:
            proc = subprocess.run(
                cmd,
                input=source,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise RenderError(f"Renderer not found: {cmd[0]}") from e
        except subprocess.TimeoutExpired as e:
            raise RenderError(f"Renderer timed out after {timeout}s: {cmd[0]}") from e

        if proc.returncode != 0:
            stderr = proc.stderr.strip()
            raise RenderError(
                f"Renderer {cmd[0]} exited {proc.returncode}"
                + (f": {stderr}" if stderr else "")
            )
        return proc.stdout

    return _render
