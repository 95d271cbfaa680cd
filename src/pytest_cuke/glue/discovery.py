"""Glue file discovery and execution.

Glue files are ordinary Python modules. They are found by a recursive
glob under a root directory and executed once each, in lexicographic
order of their resolved paths, so that registration order is the same
on every run over the same file set.
"""

import logging
import sys
from hashlib import sha1
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import TYPE_CHECKING

from pytest_cuke.errors import GlueDiscoveryError, GlueError, GlueExecutionError

from .settings import DEFAULT_MODULE_PREFIX, DEFAULT_PATTERN

if TYPE_CHECKING:
    from os import PathLike
    from types import ModuleType

logger = logging.getLogger(__name__)


def discover_glue_files(root: 'str | PathLike[str]',
                        pattern: str = DEFAULT_PATTERN) -> tuple[Path, ...]:
    """Find glue files under a root directory.

    Args:
        root: Directory to search, relative to the working directory or absolute.
        pattern: Glob pattern relative to `root`.

    Returns:
        Absolute, resolved, deduplicated paths in lexicographic order.

    Raises:
        GlueDiscoveryError: If the root is missing or is not a directory,
            or the pattern is empty, absolute, or otherwise invalid.
    """
    base = Path(root).resolve()

    if not base.exists():
        raise GlueDiscoveryError(f'Glue path {str(root)!r} does not exist')

    if not base.is_dir():
        raise GlueDiscoveryError(f'Glue path {str(root)!r} is not a directory')

    if not pattern or Path(pattern).is_absolute():
        raise GlueDiscoveryError(f'Glue pattern {pattern!r} must be a non-empty relative glob')

    try:
        found = {path.resolve() for path in base.glob(pattern) if path.is_file()}

    except (OSError, ValueError, NotImplementedError) as base_error:
        raise GlueDiscoveryError(
            f'Can not expand glue pattern {pattern!r} under {str(root)!r}',
        ) from base_error

    paths = tuple(sorted(found, key=str))
    logger.debug('Discovered %d glue file(s) under %s', len(paths), base)

    return paths


def module_name(path: Path, prefix: str = DEFAULT_MODULE_PREFIX) -> str:
    """Derive a stable `sys.modules` name for a glue file.

    Args:
        path: Absolute glue file path.
        prefix: Name prefix.

    Returns:
        A top-level module name unique per path.
    """
    digest = sha1(str(path).encode('utf-8'), usedforsecurity=False).hexdigest()[:12]
    stem = ''.join(char if char.isalnum() else '_' for char in path.stem)

    return f'{prefix}_{stem}_{digest}'


def load_glue_file(path: Path, prefix: str = DEFAULT_MODULE_PREFIX) -> 'ModuleType':
    """Execute the top-level code of a glue file.

    The module is registered in `sys.modules` before execution and
    replaces any module previously loaded from the same path. It is
    removed again if execution fails.

    Args:
        path: Absolute glue file path.
        prefix: Prefix of the module name.

    Returns:
        The executed module.

    Raises:
        GlueExecutionError: If the module raises during execution.
            `BaseException`s that are not errors (`SystemExit`,
            `KeyboardInterrupt`) propagate unwrapped.
    """
    name = module_name(path, prefix)

    spec = spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise GlueExecutionError(
            f'Can not create a module loader for {path.name!r}',
            context={'filename': str(path)},
        )

    module = module_from_spec(spec)
    sys.modules[name] = module

    logger.debug('Loading glue file %s as %s', path, name)

    try:
        spec.loader.exec_module(module)

    except GlueError:
        sys.modules.pop(name, None)
        raise

    except Exception as base:
        sys.modules.pop(name, None)
        raise GlueExecutionError.from_exception(path, base) from base

    except BaseException:
        sys.modules.pop(name, None)
        raise

    return module


def discover_and_load(root: 'str | PathLike[str]', pattern: str = DEFAULT_PATTERN,
                      prefix: str = DEFAULT_MODULE_PREFIX) -> tuple[Path, ...]:
    """Discover glue files and execute each of them in order.

    Args:
        root: Directory to search.
        pattern: Glob pattern relative to `root`.
        prefix: Prefix of the module names.

    Returns:
        Paths of the loaded files, in load order.

    Raises:
        GlueDiscoveryError: If discovery fails.
        GlueExecutionError: If a glue file raises during execution.
    """
    paths = discover_glue_files(root, pattern)
    for path in paths:
        load_glue_file(path, prefix)

    return paths
