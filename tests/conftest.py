"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def sample_markdown() -> str:
    """A README-like document touching every brace context."""
    return textwrap.dedent("""\
        Normal prose with {placeholder} and {{DOUBLE}} tokens.
        Inline code: `{:key => :value}` and `{{WRAP}}`.

        ```ruby
        expect { mod.module_eval(modified, src_path, 1) }.to raise_error(Error)
        nested = {outer: {inner: {deep: true}}}
        ```

        Outside fence again {another}.
    """)


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """A project root with no config file, set as the working directory."""
    monkeypatch.chdir(tmp_path)
    for name in ("BRACEFENCE_DISABLE", "BRACEFENCE_CLEAN_DOCS", "BRACEFENCE_DISABLE_FALLBACK"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way it was after a logging test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)
