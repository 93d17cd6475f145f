"""Core value helpers for scenario documents.

Scenario documents carry free-form payloads (`data` on steps and
validations). This module defines the value categories recognized by the
runtime and the rule used to render a payload as the text handed to the
browser.
"""

from datetime import date, datetime, timedelta
from json import dumps
from typing import Annotated, Any

from pydantic import BeforeValidator, SecretStr

#: A value in runtime represents any Python object received from
#: documents, custom handlers, or the automation layer.
type RuntimeValue = Any

MAPPINGS = (dict,)
SCALARS = (date, datetime, timedelta, str, bytes, int, float, bool, SecretStr)
SEQUENCES = (list, tuple, set)


def blank_to_none(value: Any) -> Any:  # noqa: ANN401
    """Read an empty string as a missing value."""
    if value == '':
        return None

    return value


#: Optional text field. Form-based editors store unset fields as `''`.
OptionalText = Annotated[str | None, BeforeValidator(blank_to_none)]


def stringify(value: RuntimeValue) -> str:
    """Render a document payload as text.

    Missing payloads become an empty string, booleans use their JSON
    spelling, and containers are rendered as compact JSON. Everything
    else is converted with `str()`.

    Args:
        value: Payload taken from a step or a validation.

    Returns:
        Text representation of the payload.
    """
    if value is None:
        return ''

    if isinstance(value, bool):
        return 'true' if value else 'false'

    if isinstance(value, SecretStr):
        return value.get_secret_value()

    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')

    if isinstance(value, MAPPINGS + SEQUENCES):
        return dumps(
            list(value) if isinstance(value, set) else value,
            ensure_ascii=False,
            separators=(',', ':'),
            default=str,
        )

    return str(value)
