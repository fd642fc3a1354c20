"""
Schema-driven validation of product attribute maps.

A category carries an ordered list of attribute definitions. Product
attributes are a free-form ``{name: value}`` map; every definition in the
schema is checked against it in schema order and the first failure wins.
Keys the schema does not mention are accepted unless strict mode is on.

Everything here is pure: callers fetch the schema and any existing
attributes before calling in.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Mapping

from storefront_engine.common.exceptions import AttributeValidationError

STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"


@dataclass(frozen=True)
class AttributeDefinition:
    """One entry of a category's attribute schema."""

    name: str
    type: str = STRING
    required: bool = False

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AttributeDefinition":
        return cls(
            name=raw["name"],
            type=raw.get("type") or STRING,
            required=bool(raw.get("required", False)),
        )


def load_schema(raw_schema: Iterable[Mapping[str, Any]] | None) -> list[AttributeDefinition]:
    """Build definitions from the JSON stored on a category row."""
    return [AttributeDefinition.from_dict(item) for item in raw_schema or ()]


def _is_number(value: Any) -> bool:
    # bool is an int subclass; it is never a number attribute.
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def _check_type(definition: AttributeDefinition, value: Any) -> None:
    if definition.type == NUMBER:
        if not _is_number(value):
            raise AttributeValidationError(definition.name, "must be a number")
    elif definition.type == BOOLEAN:
        if not isinstance(value, bool):
            raise AttributeValidationError(definition.name, "must be a boolean")
    elif not isinstance(value, str):
        # Any other declared type falls back to string.
        raise AttributeValidationError(definition.name, "must be a string")


def validate_attributes(
    schema: Iterable[AttributeDefinition],
    candidate: Mapping[str, Any],
    *,
    strict: bool = False,
) -> None:
    """
    Validate ``candidate`` against ``schema``.

    Raises:
        AttributeValidationError: for the first failing definition in schema
            order, or (strict mode only) for the first unknown key.
    """
    schema = list(schema)
    for definition in schema:
        value = candidate.get(definition.name)

        if definition.required and (value is None or value == ""):
            raise AttributeValidationError(definition.name, "is required")

        if value is None:
            continue

        _check_type(definition, value)

    if strict:
        allowed = {definition.name for definition in schema}
        for key in candidate:
            if key not in allowed:
                raise AttributeValidationError(key, "is not allowed for this category")


def merge_attributes(
    existing: Mapping[str, Any] | None,
    incoming: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Shallow key-wise overwrite of ``existing`` by ``incoming``."""
    merged = dict(existing or {})
    merged.update(incoming or {})
    return merged
