"""Registration callbacks bound to the DSL keywords.

A `GlueRegistry` holds the two accumulators of one load. Its bound
methods are what `Given`, `When`, `Then`, `And`, `But`, `Before` and
`After` resolve to while glue files execute.

Each callback accepts its body directly or works as a decorator::

    Given(r'^I have (\\d+) cukes$', have_cukes)

    @When(r'^I eat (\\d+)$')
    def eat(count): ...

    @Before
    def reset(): ...
"""

import logging
from typing import TYPE_CHECKING, Final

from pytest_cuke.errors import GlueDefinitionError

from .location import locate_caller
from .models import Hook, StepDefinition

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from .models import Body, Phase, SourceLocation

logger = logging.getLogger(__name__)

#: Default of an omitted body, selecting the decorator form.
_OMITTED: Final = object()


class GlueRegistry:
    """Accumulators of step definitions and hooks for a single load.

    Attributes:
        step_definitions: Registered steps in declaration order.
        hooks: Registered before and after hooks in declaration order.
    """

    def __init__(self) -> None:
        self.step_definitions: list[StepDefinition] = []
        self.hooks: list[Hook] = []

    def step(self, pattern: object,
             function: 'Body | object' = _OMITTED) -> 'Body | Callable[[Body], Body]':
        """Register a step definition.

        Args:
            pattern: Pattern matched against step text, stored as given.
            function: Step body. When omitted, a decorator is returned.

        Returns:
            The registered function, or a decorator registering one.

        Raises:
            GlueDefinitionError: If the body is not callable.
        """
        location = locate_caller()

        def register(body: 'Body') -> 'Body':
            self._ensure_callable(body, location)
            self.step_definitions.append(StepDefinition(
                pattern=pattern,
                function=body,
                location=location,
            ))
            logger.debug('Registered step %r at %s', pattern, location)
            return body

        if function is _OMITTED:
            return register

        return register(function)

    def before(self, function: 'Body | object' = _OMITTED) -> 'Body | Callable[[Body], Body]':
        """Register a hook run before each scenario.

        Args:
            function: Hook body. When omitted, a decorator is returned.

        Returns:
            The registered function, or a decorator registering one.

        Raises:
            GlueDefinitionError: If the body is not callable.
        """
        return self._hook('before', function, locate_caller())

    def after(self, function: 'Body | object' = _OMITTED) -> 'Body | Callable[[Body], Body]':
        """Register a hook run after each scenario.

        Args:
            function: Hook body. When omitted, a decorator is returned.

        Returns:
            The registered function, or a decorator registering one.

        Raises:
            GlueDefinitionError: If the body is not callable.
        """
        return self._hook('after', function, locate_caller())

    def _hook(self, phase: 'Phase', function: 'Body | object',
              location: 'SourceLocation') -> 'Body | Callable[[Body], Body]':
        def register(body: 'Body') -> 'Body':
            self._ensure_callable(body, location)
            self.hooks.append(Hook(
                function=body,
                location=location,
                phase=phase,
            ))
            logger.debug('Registered %s hook at %s', phase, location)
            return body

        if function is _OMITTED:
            return register

        return register(function)

    @staticmethod
    def _ensure_callable(body: object, location: 'SourceLocation') -> None:
        if not callable(body):
            raise GlueDefinitionError(
                f'Glue body must be callable, got {type(body).__name__}',
                context={
                    'filename': location.path,
                    'line_num': location.line,
                    'column_num': location.column,
                },
            )
