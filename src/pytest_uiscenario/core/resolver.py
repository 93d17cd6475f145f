"""Target resolution for step and validation selectors.

Resolution turns a selector and a selector strategy into a Playwright
locator. It performs no I/O: a locator matching nothing (or an `nth`
index past the last match) only fails when an action or assertion uses it.
"""

from collections.abc import Callable
from json import dumps
from typing import TYPE_CHECKING, ClassVar

from pytest_uiscenario.errors import UnsupportedSelectorType

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

#: Selector strategy applied when a document leaves `selectorType` unset.
DEFAULT_SELECTOR_TYPE = 'css'


def _css(selector: str) -> str:
    return selector


def _xpath(selector: str) -> str:
    return f'xpath={selector}'


def _id(selector: str) -> str:
    return f'#{selector}'


def _text(selector: str) -> str:
    return f'text={selector}'


class TargetResolver:
    """Resolve selectors into locators.

    Strategies `css`, `xpath`, `id` and `text` are expressed as selector
    engine strings passed to `Page.locator`; `testId` uses the framework
    test-id lookup (`Page.get_by_test_id`).
    """

    #: Selector engine string builders for locator-based strategies.
    selectors: ClassVar[dict[str, Callable[[str], str]]] = {
        'css': _css,
        'xpath': _xpath,
        'id': _id,
        'text': _text,
    }

    def describe(self, selector: str, selector_type: str | None = None) -> str:
        """Return the deterministic description of a target.

        Args:
            selector: Selector as written in the document.
            selector_type: Selector strategy, `css` when omitted.

        Returns:
            The selector engine string of the strategy; `testId` yields
            the `internal:testid` string of `Page.get_by_test_id`.

        Raises:
            UnsupportedSelectorType: If the strategy is unknown.
        """
        selector_type = selector_type or DEFAULT_SELECTOR_TYPE

        if selector_type == 'testId':
            return f'internal:testid=[data-testid={dumps(selector)}s]'

        if builder := self.selectors.get(selector_type):
            return builder(selector)

        raise UnsupportedSelectorType(selector_type)

    def resolve(self, page: 'Page', selector: str,
                selector_type: str | None = None,
                nth: int | None = None) -> 'Locator':
        """Resolve a selector into a locator.

        Args:
            page: Page the locator is bound to.
            selector: Selector as written in the document.
            selector_type: Selector strategy, `css` when omitted.
            nth: Optional zero-based index narrowing the matches.

        Returns:
            A locator for the matched elements (or the `nth` one).

        Raises:
            UnsupportedSelectorType: If the strategy is unknown.
        """
        selector_type = selector_type or DEFAULT_SELECTOR_TYPE

        if selector_type == 'testId':
            locator = page.get_by_test_id(selector)
        elif builder := self.selectors.get(selector_type):
            locator = page.locator(builder(selector))
        else:
            raise UnsupportedSelectorType(selector_type)

        if nth is not None and nth >= 0:
            return locator.nth(nth)

        return locator
