"""Glue loading settings resolved from the environment."""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from pytest_cuke.models import SettingsModel

DEFAULT_PATTERN = '**/*.py'
DEFAULT_MODULE_PREFIX = 'cuke_glue'


class GlueSettings(SettingsModel):
    """Settings controlling discovery and loading of glue files.

    Values are read from `CUKE_*` environment variables, for example
    `CUKE_PATTERN='steps/**/*.py'`.
    """

    model_config = SettingsConfigDict(
        env_prefix='CUKE_',
        frozen=True,
        extra='ignore',
    )

    pattern: str = Field(
        default=DEFAULT_PATTERN,
        min_length=1,
        title='Glob pattern',
        description=(
            'Glob pattern, relative to the glue root, selecting glue files. '
            'Recursive patterns (`**`) match at any depth.'
        ),
    )

    module_prefix: str = Field(
        default=DEFAULT_MODULE_PREFIX,
        pattern=r'^[A-Za-z_]\w*$',
        title='Module prefix',
        description=(
            'Prefix of the names under which loaded glue files '
            'are registered in `sys.modules`.'
        ),
    )
