"""Glue loading for behaviour-driven test specifications.

This package discovers user-authored glue files, executes them with the
`Given`, `When`, `Then`, `And`, `But`, `Before` and `After` keywords
temporarily available as builtins, and collects every declaration
together with the location it was written at.

The primary public entry point is `GlueLoader`, whose `load_glue`
method returns the aggregate built by a caller-supplied factory
(`Glue` by default).
"""

from .discovery import discover_and_load, discover_glue_files, load_glue_file
from .injector import AFTER_KEYWORDS, BEFORE_KEYWORDS, STEP_KEYWORDS, GlobalsInjector
from .loader import GlueLoader, LoadState, load_glue
from .location import CALLER_DEPTH, locate_caller
from .models import Glue, Hook, SourceLocation, StepDefinition
from .registry import GlueRegistry
from .settings import GlueSettings

__all__ = (
    'AFTER_KEYWORDS',
    'BEFORE_KEYWORDS',
    'CALLER_DEPTH',
    'STEP_KEYWORDS',
    'GlobalsInjector',
    'Glue',
    'GlueLoader',
    'GlueRegistry',
    'GlueSettings',
    'Hook',
    'LoadState',
    'SourceLocation',
    'StepDefinition',
    'discover_and_load',
    'discover_glue_files',
    'load_glue',
    'load_glue_file',
    'locate_caller',
)
