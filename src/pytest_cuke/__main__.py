"""CLI utilities for inspecting pytest-cuke glue.

Loads a glue directory the same way the test runner does and prints
every step definition and hook with the location it was declared at.
"""

from pathlib import Path
from re import Pattern

from click import ClickException, argument, echo, group, option
from click import Path as PathParam
from yaml import safe_dump

from pytest_cuke.errors import GlueError
from pytest_cuke.glue import Glue, GlueLoader, GlueSettings

GlueDirectory = PathParam(
    exists=True,
    file_okay=False,
    dir_okay=True,
    readable=True,
    path_type=Path,
)


def _describe(glue: Glue) -> dict[str, list[dict[str, str]]]:
    """Build a YAML-friendly description of loaded glue.

    Args:
        glue: Loaded glue aggregate.

    Returns:
        Mapping with `steps` and `hooks` lists.
    """
    steps = []
    for step in glue.step_definitions:
        pattern = step.pattern.pattern if isinstance(step.pattern, Pattern) else step.pattern
        if not isinstance(pattern, str):
            pattern = repr(pattern)
        steps.append({
            'pattern': pattern,
            'function': getattr(step.function, '__qualname__', repr(step.function)),
            'location': str(step.location),
        })

    hooks = [
        {
            'phase': hook.phase,
            'function': getattr(hook.function, '__qualname__', repr(hook.function)),
            'location': str(hook.location),
        }
        for hook in glue.hooks
    ]

    return {'steps': steps, 'hooks': hooks}


@group(help='Command-line utilities for pytest-cuke glue.')
def cli() -> None:
    """Root CLI group for pytest-cuke tools."""
    return None


@cli.command(
    name='glue',
    help='Load a glue directory and print its step definitions and hooks.',
)
@option(
    '-p', '--pattern',
    default=None,
    help='Glob pattern selecting glue files under the directory.',
)
@argument(
    'path',
    type=GlueDirectory,
    default='.',
)
def print_glue(path: Path, pattern: str | None) -> None:
    """Print loaded glue as YAML.

    Args:
        path: Glue directory.
        pattern: Optional glob pattern override.
    """
    settings = GlueSettings(pattern=pattern) if pattern else GlueSettings()

    try:
        glue = GlueLoader(settings).load_glue(path)

    except GlueError as error:
        raise ClickException(str(error)) from error

    echo(safe_dump(_describe(glue), sort_keys=False), nl=False)


if __name__ == '__main__':
    cli()
