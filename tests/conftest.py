"""Tests configurations and fixtures."""

import builtins
import sys
from textwrap import dedent
from typing import TYPE_CHECKING

import pytest

from pytest_cuke.glue import AFTER_KEYWORDS, BEFORE_KEYWORDS, STEP_KEYWORDS
from pytest_cuke.glue.settings import DEFAULT_MODULE_PREFIX

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

pytest_plugins = ('pytester',)

KEYWORDS = (*STEP_KEYWORDS, *BEFORE_KEYWORDS, *AFTER_KEYWORDS)


@pytest.fixture(autouse=True)
def clean_glue_modules() -> 'Iterator[None]':
    """Drop glue modules registered in `sys.modules` by a test."""
    yield

    for name in tuple(sys.modules):
        if name.startswith(f'{DEFAULT_MODULE_PREFIX}_'):
            del sys.modules[name]


@pytest.fixture
def glue_root(tmp_path: 'Path', monkeypatch: pytest.MonkeyPatch) -> 'Path':
    """Provide an empty glue directory inside the working directory.

    The working directory is switched to the temporary directory, so
    locations of loaded glue start with `glue/`.

    Returns:
        Path of the `glue` directory.
    """
    monkeypatch.chdir(tmp_path)

    root = tmp_path / 'glue'
    root.mkdir()

    return root


@pytest.fixture
def write_glue(glue_root: 'Path') -> 'Callable[[str, str], Path]':
    """Provide a factory writing glue files under the glue directory.

    The content is dedented, so tests can write glue inline with any
    indentation. Line and column numbers refer to the dedented text.
    """
    def write(name: str, content: str) -> 'Path':
        """Write a glue file.

        Args:
            name: Path relative to the glue directory.
            content: Python source of the glue file.

        Returns:
            Path of the written file.
        """
        path = glue_root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(content).lstrip('\n'), encoding='utf-8')

        return path

    return write


@pytest.fixture
def assert_keywords_absent() -> 'Callable[[], None]':
    """Provide a check that no DSL keyword is bound in builtins."""
    def check() -> None:
        for keyword in KEYWORDS:
            assert not hasattr(builtins, keyword), keyword

    return check
