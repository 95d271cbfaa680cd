"""Call-site resolution for glue registrations.

The locator walks the live frame stack rather than parsing formatted
tracebacks. The frame of interest sits at a fixed distance from the
locator: the registration callback called it, and the glue author's
statement called the callback.
"""

import logging
import os
from inspect import currentframe, getframeinfo
from typing import TYPE_CHECKING, Final

from pytest_cuke.errors import ErrorContext, LocationResolutionError

from .models import SourceLocation

if TYPE_CHECKING:
    from types import FrameType

logger = logging.getLogger(__name__)

#: Frames between the locator and the glue author's call:
#: `locate_caller` itself, then the registration callback.
CALLER_DEPTH: Final = 2


def _walk_back(frame: 'FrameType | None', depth: int) -> 'FrameType | None':
    for _ in range(depth):
        if frame is None:
            break
        frame = frame.f_back
    return frame


def relative_path(filename: str) -> str:
    """Express a code filename relative to the working directory.

    Pseudo filenames such as `<string>` are returned unchanged.

    Args:
        filename: Filename from a code object.

    Returns:
        Relative path string.
    """
    if filename.startswith('<') and filename.endswith('>'):
        return filename

    return os.path.relpath(filename, os.getcwd())


def locate_frame(frame: 'FrameType') -> SourceLocation:
    """Build a source location from the current instruction of a frame.

    Args:
        frame: Frame whose executing call should be located.

    Returns:
        Location of the instruction being executed by the frame.

    Raises:
        LocationResolutionError: If the interpreter provides no line or
            column for the instruction (for example when running with
            `-X no_debug_ranges`).
    """
    filename = frame.f_code.co_filename
    info = getframeinfo(frame, context=0)
    positions = info.positions

    line = positions.lineno if positions else None
    column = positions.col_offset if positions else None

    if line is None or column is None:
        raise LocationResolutionError(
            'Call site has no line or column information',
            context=ErrorContext(filename=filename, line_num=info.lineno),
        )

    return SourceLocation(
        path=relative_path(filename),
        line=line,
        column=column + 1,
    )


def locate_caller(depth: int = CALLER_DEPTH) -> SourceLocation:
    """Locate the code that called the registration callback.

    Must be called directly from the registration callback, so that
    the glue author's frame is exactly `depth` frames away.

    Args:
        depth: Distance from this function's frame to the frame to locate.

    Returns:
        Location of the glue author's DSL call.

    Raises:
        LocationResolutionError: If the stack is shallower than `depth`
            or the call site has no position information.
    """
    frame = _walk_back(currentframe(), depth)
    if frame is None:
        raise LocationResolutionError(f'Call stack is shallower than {depth} frames')

    try:
        location = locate_frame(frame)
    finally:
        del frame

    logger.debug('Located call site at %s', location)

    return location
