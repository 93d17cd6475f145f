"""Base Pydantic models for scenario documents and settings.

Document models are frozen, so a loaded scenario cannot change while it
runs, and they speak camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Frozen base of every document element and report.

    Unknown keys are rejected so a misspelt field fails loading instead
    of being dropped. Fields are written in camelCase in documents
    (`waitTime`, `selectorType`) and snake_case in Python; both are
    accepted on input and camelCase is dumped.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )


class SettingsModel(BaseSettings):
    """Frozen base of settings resolved from the environment.

    Unrelated variables that happen to share the prefix are ignored.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
