"""Glue records produced by a load.

This module defines the immutable value objects attached to every
registration made by a glue file, and the default `Glue` aggregate
built from them.
"""

from collections.abc import Callable, Sequence
from typing import Any, Literal, Self

from pydantic import Field

from pytest_cuke.models import SchemaModel

#: Behaviour function attached to a step definition or a hook.
type Body = Callable[..., Any]

#: Hook execution phase.
type Phase = Literal['before', 'after']


class SourceLocation(SchemaModel):
    """Position of a registration call inside a glue file."""

    path: str = Field(
        title='Path',
        description='Glue file path relative to the working directory.',
    )

    line: int = Field(
        ge=1,
        title='Line',
        description='1-based line of the registration call.',
    )

    column: int = Field(
        ge=1,
        title='Column',
        description='1-based column of the registration call.',
    )

    def __str__(self) -> str:
        return f'{self.path}:{self.line}:{self.column}'


class StepDefinition(SchemaModel):
    """A pattern paired with the function run when a step matches it.

    The pattern is opaque: it is stored as given by the glue author
    (a string, a compiled `re` pattern of any kind, or another matcher
    object) and is neither compiled nor validated here.
    """

    pattern: Any = Field(
        title='Step pattern',
        description='Pattern matched against step text, usually a regular expression.',
    )

    function: Body = Field(
        title='Step function',
        description='Callable invoked with the pattern captures.',
    )

    location: SourceLocation = Field(
        title='Location',
        description='Where the step was declared.',
    )


class Hook(SchemaModel):
    """A function run before or after each scenario."""

    function: Body = Field(
        title='Hook function',
        description='Callable invoked around each scenario.',
    )

    location: SourceLocation = Field(
        title='Location',
        description='Where the hook was declared.',
    )

    phase: Phase = Field(
        title='Phase',
        description='Whether the hook runs before or after a scenario.',
    )


class Glue(SchemaModel):
    """All step definitions and hooks loaded from a glue directory.

    Both sequences keep declaration order: files in discovery order,
    statements in source order within each file.
    """

    step_definitions: tuple[StepDefinition, ...] = Field(default=())
    hooks: tuple[Hook, ...] = Field(default=())

    @property
    def before_hooks(self) -> tuple[Hook, ...]:
        return tuple(hook for hook in self.hooks if hook.phase == 'before')

    @property
    def after_hooks(self) -> tuple[Hook, ...]:
        return tuple(hook for hook in self.hooks if hook.phase == 'after')

    @classmethod
    def from_registrations(cls, step_definitions: Sequence[StepDefinition],
                           hooks: Sequence[Hook]) -> Self:
        """Default glue factory.

        Args:
            step_definitions: Registered steps in declaration order.
            hooks: Registered hooks in declaration order.

        Returns:
            A new `Glue` aggregate.
        """
        return cls(step_definitions=tuple(step_definitions), hooks=tuple(hooks))
