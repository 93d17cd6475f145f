"""Tests for validation evaluation."""

from asyncio import run
from re import Pattern
from typing import TYPE_CHECKING

import pytest
from playwright.async_api import Error as PlaywrightError

from pytest_uiscenario.context import RunContext
from pytest_uiscenario.core import TargetResolver, ValidationEvaluator
from pytest_uiscenario.errors import (
    CustomValidationNotFound,
    MissingAttributeKey,
    MissingCssPropertyKey,
    MissingSelector,
    UnsupportedValidationType,
    UnsupportedValidationWarning,
    ValidationFailure,
)
from pytest_uiscenario.extensions import CustomValidation
from pytest_uiscenario.schema import ValidationStep

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

    from pytest_uiscenario.core import CustomLogicRegistry


@pytest.fixture
def evaluator(registry: 'CustomLogicRegistry', expect: 'MockType') -> ValidationEvaluator:
    """Provide an evaluator with a mocked `expect`."""
    return ValidationEvaluator(registry, TargetResolver(), expect=expect)


def evaluate(evaluator: ValidationEvaluator, page: 'MockType', validation: dict,
             scope: 'MockType | None' = None) -> None:
    """Evaluate one validation synchronously."""
    run(evaluator.evaluate(
        page,
        ValidationStep.model_validate(validation),
        scope,
        RunContext(),
    ))


@pytest.mark.parametrize('type_, method, data, expected', (
    pytest.param('toHaveText', 'to_have_text', 'Welcome', ('Welcome',), id='text'),
    pytest.param('toHaveValue', 'to_have_value', 5, ('5',), id='value'),
    pytest.param('toBeVisible', 'to_be_visible', None, (), id='visible'),
    pytest.param('toBeHidden', 'to_be_hidden', None, (), id='hidden'),
))
def test_element_assertions(evaluator: ValidationEvaluator, page: 'MockType',  # noqa: PLR0913
                            locator: 'MockType', expect: 'MockType', assertion: 'MockType',
                            type_: str, method: str, data: object, expected: tuple) -> None:
    """Assert element state against the scope target."""
    evaluate(evaluator, page, {'type': type_, 'data': data}, locator)

    expect.assert_called_once_with(locator, None)
    getattr(assertion, method).assert_awaited_once_with(*expected)


def test_validation_selector(evaluator: ValidationEvaluator, page: 'MockType',
                             locator: 'MockType', expect: 'MockType',
                             make_locator: 'Callable[..., MockType]') -> None:
    """Resolve the validation's own selector instead of the scope."""
    scope = make_locator()

    evaluate(evaluator, page, {
        'type': 'toBeVisible',
        'selector': 'dashboard',
        'selectorType': 'testId',
        'nth': 1,
        'message': 'dashboard shown',
    }, scope)

    page.get_by_test_id.assert_called_once_with('dashboard')
    locator.nth.assert_called_once_with(1)
    expect.assert_called_once_with(locator, 'dashboard shown')


def test_page_title(evaluator: ValidationEvaluator, page: 'MockType',
                    expect: 'MockType', assertion: 'MockType') -> None:
    """Assert the page title."""
    evaluate(evaluator, page, {'type': 'toHaveTitle', 'data': 'Home'})

    expect.assert_called_once_with(page, None)
    assertion.to_have_title.assert_awaited_once_with('Home')


def test_page_url(evaluator: ValidationEvaluator, page: 'MockType', assertion: 'MockType') -> None:
    """Assert the page URL against a regular expression."""
    evaluate(evaluator, page, {
        'type': 'toHaveURL',
        'data': '/dashboard$',
        'expectOptions': {'timeout': 1000},
    })

    (pattern,), options = assertion.to_have_url.await_args
    assert isinstance(pattern, Pattern)
    assert pattern.pattern == '/dashboard$'
    assert options == {'timeout': 1000}


def test_class_pattern(evaluator: ValidationEvaluator, page: 'MockType',
                       locator: 'MockType', assertion: 'MockType') -> None:
    """Assert the class attribute against a regular expression."""
    evaluate(evaluator, page, {'type': 'toHaveClass', 'data': 'active'}, locator)

    (pattern,), _ = assertion.to_have_class.await_args
    assert pattern.pattern == 'active'


def test_attribute(evaluator: ValidationEvaluator, page: 'MockType',
                   locator: 'MockType', assertion: 'MockType') -> None:
    """Assert an attribute value."""
    evaluate(evaluator, page, {
        'type': 'toHaveAttribute',
        'attribute': 'aria-expanded',
        'data': True,
    }, locator)

    assertion.to_have_attribute.assert_awaited_once_with('aria-expanded', 'true')


def test_css(evaluator: ValidationEvaluator, page: 'MockType',
             locator: 'MockType', assertion: 'MockType') -> None:
    """Assert a computed style property."""
    evaluate(evaluator, page, {
        'type': 'toHaveCSS',
        'cssProperty': 'display',
        'data': 'none',
    }, locator)

    assertion.to_have_css.assert_awaited_once_with('display', 'none')


def test_attribute_key_missing(evaluator: ValidationEvaluator, page: 'MockType',
                               locator: 'MockType', expect: 'MockType') -> None:
    """Fail before any assertion when `attribute` is missing."""
    with pytest.raises(MissingAttributeKey, match="'attribute' key"):
        evaluate(evaluator, page, {'type': 'toHaveAttribute', 'data': 'x'}, locator)

    expect.assert_not_called()


def test_css_property_missing(evaluator: ValidationEvaluator, page: 'MockType',
                              locator: 'MockType', expect: 'MockType') -> None:
    """Fail before any assertion when `cssProperty` is missing."""
    with pytest.raises(MissingCssPropertyKey, match="'cssProperty' key"):
        evaluate(evaluator, page, {'type': 'toHaveCSS', 'data': 'x'}, locator)

    expect.assert_not_called()


@pytest.mark.parametrize('type_', ('toBeVisible', 'toHaveText', 'toHaveClass'))
def test_missing_selector(evaluator: ValidationEvaluator, page: 'MockType', type_: str) -> None:
    """Fail element validations without a target."""
    with pytest.raises(MissingSelector):
        evaluate(evaluator, page, {'type': type_, 'data': 'x'})


@pytest.mark.parametrize('error', (
    pytest.param(AssertionError('Locator expected to have text "Welcome"'), id='assertion'),
    pytest.param(PlaywrightError('Timeout 5000ms exceeded'), id='playwright'),
))
def test_failure(evaluator: ValidationEvaluator, page: 'MockType', locator: 'MockType',
                 assertion: 'MockType', error: Exception) -> None:
    """Report failed assertions as validation failures."""
    assertion.to_have_text.side_effect = error

    with pytest.raises(ValidationFailure) as excinfo:
        evaluate(evaluator, page, {'type': 'toHaveText', 'data': 'Welcome'}, locator)

    assert excinfo.value.reason == str(error)
    assert excinfo.value.type == 'toHaveText'


def test_failure_message_fallback(evaluator: ValidationEvaluator, page: 'MockType',
                                  locator: 'MockType', assertion: 'MockType') -> None:
    """Use the validation message for silent assertion errors."""
    assertion.to_be_visible.side_effect = AssertionError()

    with pytest.raises(ValidationFailure, match='banner shown'):
        evaluate(evaluator, page, {'type': 'toBeVisible', 'message': 'banner shown'}, locator)


def test_unsupported_type(evaluator: ValidationEvaluator, page: 'MockType', expect: 'MockType') -> None:
    """Warn and pass for unknown validation types."""
    with pytest.warns(UnsupportedValidationWarning, match='toContainText'):
        evaluate(evaluator, page, {'type': 'toContainText', 'data': 'x'})

    expect.assert_not_called()


def test_unsupported_type_strict(registry: 'CustomLogicRegistry', page: 'MockType', expect: 'MockType') -> None:
    """Fail unknown validation types on strict mode."""
    evaluator = ValidationEvaluator(registry, TargetResolver(), expect=expect, strict_validations=True)

    with pytest.raises(UnsupportedValidationType):
        evaluate(evaluator, page, {'type': 'toContainText', 'data': 'x'})


def test_custom(evaluator: ValidationEvaluator, registry: 'CustomLogicRegistry',
                page: 'MockType', locator: 'MockType', expect: 'MockType',
                mocker: 'MockerFixture') -> None:
    """Invoke a custom validation with the validation scope."""
    handler = mocker.AsyncMock()
    registry.add_validation(CustomValidation(name='isFresh', handler=handler))

    evaluate(evaluator, page, {'type': 'custom', 'customName': 'isFresh'}, locator)

    called_page, called_validation, scope = handler.await_args.args
    assert called_page is page
    assert called_validation.custom_name == 'isFresh'
    assert scope.target is locator
    assert scope.expect is expect


@pytest.mark.parametrize('error', (
    pytest.param(AssertionError('stale'), id='assertion'),
    pytest.param(RuntimeError('stale'), id='runtime'),
))
def test_custom_failure(evaluator: ValidationEvaluator, registry: 'CustomLogicRegistry',
                        page: 'MockType', error: Exception, mocker: 'MockerFixture') -> None:
    """Fail the validation when the custom handler raises."""
    registry.add_validation(CustomValidation(
        name='isFresh',
        handler=mocker.AsyncMock(side_effect=error),
    ))

    with pytest.raises(ValidationFailure, match='stale'):
        evaluate(evaluator, page, {'type': 'custom', 'customName': 'isFresh'})


def test_custom_not_found(evaluator: ValidationEvaluator, page: 'MockType') -> None:
    """Fail custom validations that are not registered."""
    with pytest.raises(CustomValidationNotFound):
        evaluate(evaluator, page, {'type': 'custom', 'customName': 'unknown'})
