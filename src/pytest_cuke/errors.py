"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report glue discovery issues, failures of glue files during loading,
and call-site resolution problems in a structured way.
"""

from os import linesep
from traceback import extract_tb
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self

FORMAT_FILENAME = '<unknown>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the glue file where the error occurred.
    filename: str | None

    #: Line number in the glue file (1-based).
    line_num: int | None
    #: Column number in the glue file (1-based).
    column_num: int | None

    #: Underlying exception that triggered formatting.
    error: Exception | None


class ErrorFormatter:
    """Utility class for formatting glue-related errors.

    Produces human-readable messages with an optional source location.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location data.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)

        if error := context.get('error'):
            message += f'{' ' * FORMAT_INDENT}{type(error).__name__}: {error}{linesep}'

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format source location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including filename, line
            and column when available.
        """
        indent = cls._ensure_indent(indent)

        filename = context.get('filename')
        if not filename:
            filename = FORMAT_FILENAME

        message = f'{indent}in "{filename}"'
        if (line_num := context.get('line_num')) is not None:
            message += f', line {line_num}'
            if (column_num := context.get('column_num')) is not None:
                message += f', column {column_num}'
        message += linesep

        return message

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class GlueWarning(UserWarning):
    """Warning emitted for non-fatal glue loading issues.

    Used when a DSL keyword already has a global binding before a load.
    The binding is temporarily shadowed and restored afterwards.
    """


class GlueError(Exception, ErrorFormatter):
    """Base exception for all pytest-cuke errors.

    All custom exceptions raised by the library inherit from this class
    to allow unified error handling by callers.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context containing optional location values.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)


class GlueDiscoveryError(GlueError):
    """Error raised when glue files cannot be discovered.

    The root path is missing or is not a directory, or the glob
    pattern is not usable. Raised before any binding is installed.
    """


class GlueExecutionError(GlueError):
    """Error raised when a glue file fails during top-level execution.

    The original exception is chained as `__cause__`.
    """

    @classmethod
    def from_exception(cls, path: 'Path', error: Exception) -> 'Self':
        """Create an execution error from an exception raised by a glue file.

        The innermost traceback entry belonging to the glue file is used
        to report the failing line. Syntax errors have no such entry and
        report the line and column of the offending token instead.

        Args:
            path: Absolute path of the failing glue file.
            error: Exception raised while executing the module.

        Returns:
            GlueExecutionError with location context.
        """
        line_num = column_num = None
        for frame in extract_tb(error.__traceback__):
            if frame.filename == str(path):
                line_num = frame.lineno

        if line_num is None and isinstance(error, SyntaxError):
            line_num = error.lineno
            column_num = error.offset

        error_context = ErrorContext(
            filename=str(path),
            line_num=line_num,
            column_num=column_num,
            error=error,
        )

        return cls(f'Failed to load glue file {path.name!r}', context=error_context)


class GlueDefinitionError(GlueError):
    """Error raised when a step or hook declaration is malformed."""


class GlueLoadError(GlueError):
    """Error raised when a load overlaps another load in progress."""


class LocationResolutionError(GlueError):
    """Error raised when a call site cannot be located.

    The stack is shallower than expected, or the interpreter does not
    provide line and column positions for the calling instruction.
    """
