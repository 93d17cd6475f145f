"""Built-in custom actions.

These handlers cover interactions that the fixed instruction set cannot
express, such as selecting a single word inside rich text.
"""

from sys import platform
from typing import TYPE_CHECKING, Any, Literal

from pydantic import Field, NonNegativeInt, ValidationError

from pytest_uiscenario.errors import ActionError
from pytest_uiscenario.extensions import CustomAction
from pytest_uiscenario.models import SchemaModel
from pytest_uiscenario.values import stringify

if TYPE_CHECKING:
    from playwright.async_api import Page

if TYPE_CHECKING:
    from pytest_uiscenario.context import RunContext
    from pytest_uiscenario.schema import TestStep

#: Locates the `nth` occurrence of `word` in the text nodes below `selector`
#: (or the whole document) and returns its client rectangle corners.
FIND_WORD_SCRIPT = '''
({ word, selector, nth }) => {
    const root = (selector && document.querySelector(selector)) || document;
    const walker = document.createTreeWalker(root, NodeFilter.SHOW_TEXT);
    const range = document.createRange();
    let count = 0;
    let node;
    while ((node = walker.nextNode())) {
        const text = node.data;
        let start = 0;
        while (true) {
            const index = text.indexOf(word, start);
            if (index === -1) break;
            if (count === nth) {
                range.setStart(node, index);
                range.setEnd(node, index + word.length);
                const rects = range.getClientRects();
                const first = rects[0];
                const last = rects[rects.length - 1];
                const bounds = range.getBoundingClientRect();
                return {
                    startX: first ? first.left : bounds.left,
                    startY: first ? first.top : bounds.top,
                    endX: last ? last.right : bounds.right,
                    endY: last ? last.bottom : bounds.bottom,
                    centerX: bounds.left + bounds.width / 2,
                    centerY: bounds.top + bounds.height / 2,
                };
            }
            count++;
            start = index + word.length;
        }
    }
    return null;
}
'''


class SelectWordOptions(SchemaModel):
    """Payload of the `selectWord` action."""

    word: str = Field(min_length=1)
    selector: str | None = None
    nth: NonNegativeInt = 0
    mode: Literal['mouse', 'keyboard', 'auto'] = 'mouse'
    method: Literal['double', 'drag'] = 'double'
    wordwise: bool = False


class QueryResponseSelectors(SchemaModel):
    """Selectors used by the `queryResponse` action."""

    fill_response: str
    click_done: str


class QueryResponseOptions(SchemaModel):
    """Payload of the `queryResponse` action."""

    selector: QueryResponseSelectors
    response_text: Any = None


def _word_chord() -> str:
    """Return the keyboard chord extending a selection by one word."""
    if platform == 'win32':
        return 'Control+Shift+ArrowRight'

    return 'Alt+Shift+ArrowRight'


async def _select_word(page: 'Page', step: 'TestStep', context: 'RunContext') -> None:  # noqa: ARG001
    """Select one occurrence of a word on the page.

    The word is looked up in text nodes, so it may sit inside a rich-text
    editor where it is not an element of its own. Mouse mode selects it
    with a double click (or a drag across its rectangle); keyboard mode
    clicks at its start and extends the selection with the keyboard.

    Args:
        page: Current page.
        step: Step whose `data` holds `SelectWordOptions`.
        context: Run context (unused).

    Raises:
        ActionError: If the payload is invalid or the word is not found.
    """
    if not isinstance(step.data, dict) or not step.data.get('word'):
        raise ActionError('selectWord', "step data must include a 'word' property")

    try:
        options = SelectWordOptions.model_validate(step.data)
    except ValidationError as base:
        raise ActionError('selectWord', f'invalid step data: {base.error_count()} errors') from base

    box = await page.evaluate(FIND_WORD_SCRIPT, {
        'word': options.word,
        'selector': options.selector,
        'nth': options.nth,
    })
    if not box:
        location = f' within {options.selector!r}' if options.selector else ''
        raise ActionError('selectWord', f'word {options.word!r} not found{location}')

    await page.mouse.move(box['centerX'], box['centerY'])

    if options.mode in ('mouse', 'auto'):
        if options.method == 'double':
            await page.mouse.click(box['centerX'], box['centerY'], click_count=2)
        else:
            await page.mouse.move(box['startX'], box['startY'])
            await page.mouse.down()
            await page.mouse.move(box['endX'], box['endY'])
            await page.mouse.up()
        return

    await page.mouse.click(box['startX'], box['startY'])
    if options.wordwise:
        await page.keyboard.press(_word_chord())
        return

    for _ in options.word:
        await page.keyboard.press('Shift+ArrowRight')


async def _query_response(page: 'Page', step: 'TestStep', context: 'RunContext') -> None:  # noqa: ARG001
    """Answer a query box and confirm it.

    Fills the response area and clicks the done button, skipping either
    element when it is not present on the page.

    Args:
        page: Current page.
        step: Step whose `data` holds `QueryResponseOptions`.
        context: Run context (unused).

    Raises:
        ActionError: If the payload is invalid.
    """
    try:
        options = QueryResponseOptions.model_validate(step.data)
    except ValidationError as base:
        raise ActionError('queryResponse', 'step data must include fillResponse and clickDone selectors') from base

    textarea = page.locator(options.selector.fill_response)
    if await textarea.count() > 0:
        await textarea.fill(stringify(options.response_text))

    done = page.locator(options.selector.click_done)
    if await done.count() > 0:
        await done.click()


select_word = CustomAction(name='selectWord', handler=_select_word)
query_response = CustomAction(name='queryResponse', handler=_query_response)
