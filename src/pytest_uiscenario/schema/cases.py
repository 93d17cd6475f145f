"""Test case definition."""

from pydantic import ConfigDict, Field

from pytest_uiscenario.models import SchemaModel

from .steps import TestStep  # noqa: TC001


class TestCase(SchemaModel):
    """Executable test case document.

    A test case is an ordered sequence of steps plus the metadata used by
    the storage collaborator (ordering, enabled flag, product grouping).
    Steps run in document order; the engine never re-sorts them.

    Storage adds bookkeeping fields (identifiers, timestamps) to stored
    documents. They are ignored rather than rejected.
    """

    __test__ = False

    model_config = ConfigDict(extra='ignore')

    description: str = Field(
        default='',
        title='Description',
        description='Human-readable description used as the report title.',
    )

    enabled: bool = Field(
        default=True,
        title='Enabled flag',
        description='Disabled cases are skipped by loaders.',
    )

    test_order: int | None = Field(
        default=None,
        title='Test order',
        description='Position of the case when a batch is sorted.',
    )

    product: str | None = Field(
        default=None,
        title='Product',
        description='Product the case belongs to.',
    )

    test_steps: list[TestStep] = Field(
        default_factory=list,
        title='Test steps',
        description='Steps executed in order.',
    )
