"""JSON Schema management."""

from functools import cache
from json import dumps

from pydantic.json_schema import GenerateJsonSchema

from pytest_uiscenario.names import ACTIONS, SELECTOR_TYPES, VALIDATION_TYPES
from pytest_uiscenario.schema import TestCase


class SchemaGenerator(GenerateJsonSchema):
    """JSON Schema generator for scenario documents.

    The document models keep `action` and `type` as open strings so that
    unknown values fail at run time rather than at load time. The
    generated schema lists the known values as suggestions for editors.
    """

    @classmethod
    @cache
    def make_schema(cls, indent: int | str | None = 4) -> str:
        """Generate the JSON Schema for scenario documents.

        Args:
            indent: Indentation level used for JSON formatting.

        Returns:
            Serialized JSON Schema string.
        """
        schema = {
            **TestCase.model_json_schema(
                schema_generator=cls,
                union_format='primitive_type_array',
            ),
            'title': 'pytest-uiscenario',
            'description': 'JSON Schema for UI scenario test cases',
            '$schema': cls.schema_dialect,
        }

        definitions = schema.get('$defs', {})
        cls.suggest(definitions.get('TestStep'), 'action', ACTIONS)
        cls.suggest(definitions.get('TestStep'), 'selectorType', SELECTOR_TYPES)
        cls.suggest(definitions.get('ValidationStep'), 'type', VALIDATION_TYPES)
        cls.suggest(definitions.get('ValidationStep'), 'selectorType', SELECTOR_TYPES)

        return dumps(
            schema,
            ensure_ascii=False,
            sort_keys=True,
            indent=indent,
        )

    @staticmethod
    def suggest(definition: dict | None, name: str, values: tuple[str, ...]) -> None:
        """Attach known values of a property as `examples`.

        Args:
            definition: Model definition in the schema.
            name: Property name (alias).
            values: Known values.
        """
        if not definition:
            return None

        if prop := definition.get('properties', {}).get(name):
            prop['examples'] = list(values)
