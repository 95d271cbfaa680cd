"""Base Pydantic models for glue records and runtime settings.

This module defines the foundational model classes used by all glue
structures. It enforces immutability and strict schema validation so
that registered steps and hooks cannot be altered once loaded.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all glue records.

    This class serves as the root for all Pydantic models representing
    loaded glue such as source locations, step definitions, and hooks.

    Design principles enforced by this model:
        - Immutability: records cannot be modified after creation.
          A location attached to a step stays the one captured at
          registration time.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos in factories.

    All glue models must inherit from this class.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    This class serves as the root for all settings models responsible for
    resolving runtime configuration (for example, environment variables,
    CI-provided values, or local overrides).

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
