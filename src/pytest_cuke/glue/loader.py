"""Glue load orchestration.

A load goes through the following states:

    IDLE -> INSTALLING -> LOADING -> RESTORING -> DONE

and ends in FAILED when discovery, a glue file, or restoration raises.
Restoration runs whatever happens during loading, so builtins are
left exactly as they were found.

Only one load may hold the injected keywords at a time. Overlapping
loads, from another thread or from a glue file loading glue itself,
are rejected rather than queued.
"""

import logging
from enum import StrEnum
from threading import Lock
from typing import TYPE_CHECKING, Any

from pytest_cuke.errors import GlueLoadError

from .discovery import discover_glue_files, load_glue_file
from .injector import AFTER_KEYWORDS, BEFORE_KEYWORDS, STEP_KEYWORDS, GlobalsInjector
from .models import Glue
from .registry import GlueRegistry
from .settings import GlueSettings

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from os import PathLike

if TYPE_CHECKING:
    from .models import Hook, StepDefinition

logger = logging.getLogger(__name__)

#: Factory turning the accumulated records into a glue aggregate.
type GlueFactory[T] = Callable[[Sequence[StepDefinition], Sequence[Hook]], T]

#: Held by the load currently owning the injected keywords.
_LOAD_LOCK = Lock()


class LoadState(StrEnum):
    """Lifecycle state of a glue load."""

    IDLE = 'idle'
    INSTALLING = 'installing'
    LOADING = 'loading'
    RESTORING = 'restoring'
    DONE = 'done'
    FAILED = 'failed'


class GlueLoader:
    """Loads glue files and builds a glue aggregate from their declarations.

    Attributes:
        settings: Discovery and loading settings.
        state: State of the most recent load.
    """

    def __init__(self, settings: GlueSettings | None = None) -> None:
        """Initialize a loader.

        Args:
            settings: Loading settings; resolved from the environment
                when omitted.
        """
        self.settings = settings or GlueSettings()
        self.state = LoadState.IDLE

    def _transition(self, state: LoadState) -> None:
        logger.debug('Glue load state %s -> %s', self.state, state)
        self.state = state

    def load_glue[T](self, glue_path: 'str | PathLike[str]',
                     glue_factory: 'GlueFactory[T] | None' = None) -> 'T | Glue':
        """Load all glue files under a path.

        Args:
            glue_path: Root directory of glue files.
            glue_factory: Callable receiving the step definitions and hooks
                in declaration order. Defaults to `Glue.from_registrations`.

        Returns:
            Whatever the factory returns.

        Raises:
            GlueLoadError: If another load is in progress.
            GlueDiscoveryError: If glue files can not be discovered.
            GlueExecutionError: If a glue file raises while loading.
            GlueDefinitionError: If a declaration is malformed.
            LocationResolutionError: If a call site can not be located.
        """
        factory: Any = glue_factory or Glue.from_registrations

        if not _LOAD_LOCK.acquire(blocking=False):
            raise GlueLoadError('Another glue load is already in progress')

        try:
            self.state = LoadState.IDLE
            registry = self._load(glue_path)

            logger.debug(
                'Loaded %d step definition(s) and %d hook(s) from %s',
                len(registry.step_definitions),
                len(registry.hooks),
                glue_path,
            )

            glue = factory(registry.step_definitions, registry.hooks)

        except BaseException:
            self._transition(LoadState.FAILED)
            raise

        finally:
            _LOAD_LOCK.release()

        self._transition(LoadState.DONE)

        return glue

    def _load(self, glue_path: 'str | PathLike[str]') -> GlueRegistry:
        paths = discover_glue_files(glue_path, self.settings.pattern)

        registry = GlueRegistry()
        injector = GlobalsInjector()

        self._transition(LoadState.INSTALLING)
        try:
            injector.install(STEP_KEYWORDS, registry.step)
            injector.install(BEFORE_KEYWORDS, registry.before)
            injector.install(AFTER_KEYWORDS, registry.after)

            self._transition(LoadState.LOADING)
            for path in paths:
                load_glue_file(path, self.settings.module_prefix)

        finally:
            self._transition(LoadState.RESTORING)
            injector.restore()

        return registry


def load_glue[T](glue_path: 'str | PathLike[str]',
                 glue_factory: 'GlueFactory[T] | None' = None, *,
                 settings: GlueSettings | None = None) -> 'T | Glue':
    """Load glue files with a one-off loader.

    Args:
        glue_path: Root directory of glue files.
        glue_factory: Aggregate factory, `Glue.from_registrations` by default.
        settings: Loading settings.

    Returns:
        Whatever the factory returns.
    """
    return GlueLoader(settings).load_glue(glue_path, glue_factory)
