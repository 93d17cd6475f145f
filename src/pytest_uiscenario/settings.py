"""Runtime configuration resolved from the environment.

Settings are read from environment variables prefixed with
`UISCENARIO_` (for example `UISCENARIO_BASE_URL`). Command-line options
of the pytest plugin and the CLI override them through
`EngineSettings.model_copy`.
"""

from typing import Literal

from pydantic import Field, NonNegativeInt, SecretStr
from pydantic_settings import SettingsConfigDict

from pytest_uiscenario.models import SettingsModel

type BrowserName = Literal['chromium', 'firefox', 'webkit']


class EngineSettings(SettingsModel):
    """Settings shared by the engine, the browser session, and the loader."""

    model_config = SettingsConfigDict(
        env_prefix='UISCENARIO_',
    )

    base_url: str | None = Field(
        default=None,
        title='Base URL',
        description='Base URL applied to new pages; relative `goto` paths resolve against it.',
    )

    token: SecretStr | None = Field(
        default=None,
        title='Token',
        description='Value substituted for `${TOKEN}` in `goto` paths by the loader.',
    )

    browser: BrowserName = Field(
        default='chromium',
        title='Browser',
        description='Browser engine launched by the browser session.',
    )

    headless: bool = Field(
        default=True,
        title='Headless mode',
        description='Launch the browser without a visible window.',
    )

    timeout: NonNegativeInt | None = Field(
        default=None,
        title='Default timeout',
        description='Default Playwright timeout in milliseconds for new pages.',
    )

    strict_targets: bool = Field(
        default=False,
        title='Strict targets',
        description=(
            'Fail element actions without a selector instead of skipping them.'
        ),
    )

    strict_validations: bool = Field(
        default=False,
        title='Strict validations',
        description=(
            'Fail unknown validation types instead of warning and passing.'
        ),
    )

    strict: bool = Field(
        default=False,
        title='Strict loading',
        description=(
            'Raise on plugin and scenario loading issues instead of warning.'
        ),
    )
