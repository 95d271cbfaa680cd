"""Pytest plugin exposing loaded glue to tests.

This module integrates the glue loader with pytest by:
- registering custom command-line and ini options;
- configuring a shared `GlueLoader` instance;
- providing a session-scoped `cuke_glue` fixture.
"""

from typing import TYPE_CHECKING

import pytest

from pytest_cuke.glue import GlueLoader, GlueSettings

if TYPE_CHECKING:
    from _pytest.config import Config
    from _pytest.config.argparsing import Parser

if TYPE_CHECKING:
    from pytest_cuke.glue import Glue


def pytest_addoption(parser: 'Parser') -> None:
    """Register pytest command-line options for pytest-cuke.

    Args:
        parser: Pytest argument parser.
    """
    parser.addoption(
        '--cuke-glue',
        action='store',
        dest='cuke_glue',
        default=None,
        metavar='PATH',
        help=(
            'Directory containing glue files with step definitions '
            'and hooks. Relative paths are resolved against the '
            'current working directory.'
        ),
    )
    parser.addoption(
        '--cuke-pattern',
        action='store',
        dest='cuke_pattern',
        default=None,
        metavar='GLOB',
        help='Glob pattern selecting glue files under the glue directory.',
    )
    parser.addini(
        'cuke_glue',
        help='Default directory containing glue files.',
        default=None,
    )


def pytest_configure(config: 'Config') -> None:
    """Configure pytest-cuke integration.

    This hook initializes a shared `GlueLoader` instance and attaches it
    to the pytest configuration object as `config.cuke_loader`.

    Args:
        config: Pytest configuration object.
    """
    overrides = {}
    if pattern := config.getoption('cuke_pattern', default=None):
        overrides['pattern'] = pattern

    config.cuke_loader = GlueLoader(GlueSettings(**overrides))  # type: ignore[attr-defined]


@pytest.fixture(scope='session')
def cuke_glue(pytestconfig: 'Config') -> 'Glue':
    """Glue loaded from the configured glue directory.

    The test is skipped when neither `--cuke-glue` nor the
    `cuke_glue` ini option is set.

    Returns:
        The loaded `Glue` aggregate.
    """
    path = pytestconfig.getoption('cuke_glue', default=None) or pytestconfig.getini('cuke_glue')
    if not path:
        pytest.skip('No glue directory configured (use --cuke-glue)')

    return pytestconfig.cuke_loader.load_glue(path)  # type: ignore[attr-defined]
