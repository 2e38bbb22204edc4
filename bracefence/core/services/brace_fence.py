"""
Brace fencing — hide literal braces from documentation link resolvers.

Doc generators that treat ``{...}`` as a cross-reference tag will try to
linkify hash literals in code examples and placeholders in prose.  The
encoder swaps the risky ASCII braces for their fullwidth lookalikes:

  - inside fenced code blocks (```)
  - inside indented code blocks (4+ spaces)
  - inside inline code spans (`...`)
  - in simple prose placeholders like {issuer} or {{TEMPLATE}}

Bare prose braces (``{1, 2, 3}``) are left alone.  After rendering, the
decoder turns every fullwidth brace in the HTML back into ASCII.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class FenceError(Exception):
    """Raised when the brace alphabets are misconfigured."""


@dataclass(frozen=True)
class BraceAlphabet:
    """An ordered (open, close) brace pair."""

    open: str
    close: str

    def __post_init__(self) -> None:
        if len(self.open) != 1 or len(self.close) != 1:
            raise FenceError(
                f"Brace alphabet needs single characters, got {self.open!r}/{self.close!r}"
            )
        if self.open == self.close:
            raise FenceError(f"Open and close brace are the same: {self.open!r}")

    @property
    def chars(self) -> str:
        return self.open + self.close


ASCII_BRACES = BraceAlphabet("{", "}")
FULLWIDTH_BRACES = BraceAlphabet("｛", "｝")  # ｛ ｝

# Letters, digits, underscore, colon, hyphen
DEFAULT_PLACEHOLDER_CHARS = r"A-Za-z0-9_:\-"


class LineMode(enum.Enum):
    """Where the scanner is between lines."""

    PROSE = "prose"
    FENCED_CODE = "fenced_code"
    INDENTED_CODE = "indented_code"


_FENCE_RE = re.compile(r"^\s*```")
_INDENTED_RE = re.compile(r"^ {4,}\S")
_INLINE_CODE_RE = re.compile(r"`([^`]+)`")


class BraceCodec:
    """Forward (sanitize) and inverse (restore) brace transforms.

    Alphabets are validated once, here.  Overlapping alphabets raise
    ``FenceError`` before any text is touched.
    """

    def __init__(
        self,
        ascii_braces: BraceAlphabet = ASCII_BRACES,
        substitute: BraceAlphabet = FULLWIDTH_BRACES,
        placeholder_chars: str = DEFAULT_PLACEHOLDER_CHARS,
    ) -> None:
        shared = set(ascii_braces.chars) & set(substitute.chars)
        if shared:
            raise FenceError(
                "ASCII braces must not overlap the substitute braces "
                f"(shared: {''.join(sorted(shared))!r})"
            )

        self.ascii_braces = ascii_braces
        self.substitute = substitute
        self.placeholder_chars = placeholder_chars

        self._encode_table = str.maketrans(ascii_braces.chars, substitute.chars)
        self._decode_table = str.maketrans(substitute.chars, ascii_braces.chars)

        o, c = re.escape(ascii_braces.open), re.escape(ascii_braces.close)
        self._double_re = re.compile(f"{o}{o}[^{o}{c}]+{c}{c}")
        try:
            self._single_re = re.compile(f"{o}[{placeholder_chars}]+{c}")
        except re.error as e:
            raise FenceError(f"Invalid placeholder character class {placeholder_chars!r}: {e}") from e

    # ── Primitives ──────────────────────────────────────────────

    def swap(self, s: str) -> str:
        """Replace every ASCII brace in ``s`` with its substitute."""
        return s.translate(self._encode_table)

    def _swap_match(self, m: re.Match) -> str:
        return self.swap(m.group(0))

    def sanitize_inline_code(self, line: str) -> str:
        """Swap braces inside `inline code` spans only."""
        return _INLINE_CODE_RE.sub(lambda m: f"`{self.swap(m.group(1))}`", line)

    def sanitize_prose(self, line: str) -> str:
        """Inline code first, then {{double}} before {single} placeholders."""
        line = self.sanitize_inline_code(line)
        line = self._double_re.sub(self._swap_match, line)
        return self._single_re.sub(self._swap_match, line)

    # ── Line state machine ──────────────────────────────────────

    def step(self, mode: LineMode, line: str) -> tuple[LineMode, str]:
        """Classify one line and return (next mode, rewritten line)."""
        if _FENCE_RE.match(line):
            if mode is LineMode.FENCED_CODE:
                return LineMode.PROSE, line
            return LineMode.FENCED_CODE, line

        if mode is LineMode.FENCED_CODE:
            return mode, self.swap(line)

        if _INDENTED_RE.match(line):
            return LineMode.INDENTED_CODE, self.swap(line)

        # Blank or unindented: any indented block is over
        return LineMode.PROSE, self.sanitize_prose(line)

    def sanitize(self, text):
        """Swap braces in code and placeholder contexts.

        Non-string input is returned unchanged.
        """
        if not isinstance(text, str):
            return text

        mode = LineMode.PROSE
        out: list[str] = []
        for line in text.split("\n"):
            mode, line = self.step(mode, line)
            out.append(line)

        if mode is LineMode.FENCED_CODE:
            logger.debug("Text ended inside an unterminated code fence")
        return "\n".join(out)

    def restore(self, text):
        """Turn every substitute brace back into ASCII, everywhere."""
        if not isinstance(text, str):
            return text
        return text.translate(self._decode_table)


# Built at import so a bad alphabet fails before any transform runs
_default_codec = BraceCodec()


def default_codec() -> BraceCodec:
    return _default_codec


def sanitize(text):
    """Sanitize with the default fullwidth alphabet."""
    return _default_codec.sanitize(text)


def restore(text):
    """Restore ASCII braces with the default fullwidth alphabet."""
    return _default_codec.restore(text)
