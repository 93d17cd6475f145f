"""Built-in custom validations."""

from typing import TYPE_CHECKING

from pytest_uiscenario.extensions import CustomValidation
from pytest_uiscenario.values import stringify

if TYPE_CHECKING:
    from playwright.async_api import Page

if TYPE_CHECKING:
    from pytest_uiscenario.context import ValidationScope
    from pytest_uiscenario.schema import ValidationStep


async def _contains_text(page: 'Page', validation: 'ValidationStep', scope: 'ValidationScope') -> None:
    """Check that the target text (or the page content) contains a substring.

    Args:
        page: Current page.
        validation: Validation whose `data` holds the expected substring.
        scope: Validation scope providing the target locator.

    Raises:
        ValueError: If the expected substring is empty.
        AssertionError: If the substring is not found.
    """
    expected = stringify(validation.data)
    if not expected:
        raise ValueError("custom validation 'containsText' requires 'data' with expected substring")

    if scope.target is not None:
        haystack = await scope.target.text_content() or ''
    else:
        haystack = await page.content()

    if expected not in haystack:
        raise AssertionError(validation.message or f'Expected text to include: {expected}')


contains_text = CustomValidation(name='containsText', handler=_contains_text)
