"""Validation of caller-supplied query input.

Sort tokens and filter objects arriving from HTTP query parameters are
untrusted. Everything here raises MalformedQueryInputError; the query
builder catches it, logs a warning and carries on without the input.
"""

import json
from typing import Any, Callable, Collection, Dict, Optional

from ....config.constants import ALLOWED_FILTER_OPERATORS, LIST_FILTER_OPERATORS
from ....core.exceptions import MalformedQueryInputError
from ..entities.requests import SortField, SortOrder, is_valid_field_path

SCALAR_TYPES = (str, int, float, bool, type(None))


def parse_sort_token(token: str) -> SortField:
    """Parse one ``field[:asc|desc]`` token.

    A missing or empty direction means ascending.
    """
    field_part, _, direction_part = token.partition(":")
    field_name = field_part.strip()
    if not is_valid_field_path(field_name):
        raise MalformedQueryInputError("sort", token, f"invalid sort field {field_name!r}")

    direction = direction_part.strip() or SortOrder.ASC.value
    try:
        order = SortOrder.parse(direction)
    except ValueError:
        raise MalformedQueryInputError("sort", token, f"invalid sort direction {direction!r}")

    return SortField(field_name, order)


def decode_caller_filter(
    raw: str,
    allowed_fields: Optional[Collection[str]] = None,
    field_mapper: Optional[Callable[[str], str]] = None,
) -> Dict[str, Any]:
    """Decode and validate a JSON-encoded caller filter.

    Args:
        raw: JSON text from the ``filter`` query parameter
        allowed_fields: Store keys the caller may filter on, or None for any
        field_mapper: Translates caller field names to store keys

    Returns:
        Filter mapping keyed by store keys

    Raises:
        MalformedQueryInputError: If the text is not a JSON object or uses
            a key or operator outside the permitted query shape
    """
    try:
        decoded = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise MalformedQueryInputError("filter", raw, f"invalid JSON: {e}")

    if not isinstance(decoded, dict):
        raise MalformedQueryInputError("filter", raw, "must be a JSON object")

    result: Dict[str, Any] = {}
    for key, value in decoded.items():
        if not is_valid_field_path(key):
            raise MalformedQueryInputError("filter", raw, f"field {key!r} is not a plain field path")

        store_key = field_mapper(key) if field_mapper else key
        if allowed_fields is not None and store_key not in allowed_fields:
            raise MalformedQueryInputError("filter", raw, f"field {key!r} is not filterable")

        if store_key in result:
            raise MalformedQueryInputError("filter", raw, f"field {key!r} duplicates {store_key!r}")

        result[store_key] = validate_filter_value(key, value, raw)

    return result


def validate_filter_value(key: str, value: Any, raw: str) -> Any:
    """Validate the value side of one caller filter entry."""
    if isinstance(value, SCALAR_TYPES):
        return value

    if isinstance(value, list):
        _require_scalar_list(key, value, raw)
        return value

    if isinstance(value, dict):
        if not value:
            raise MalformedQueryInputError("filter", raw, f"empty condition for {key!r}")
        for operator, operand in value.items():
            if operator not in ALLOWED_FILTER_OPERATORS:
                raise MalformedQueryInputError("filter", raw, f"operator {operator!r} is not allowed")
            if operator in LIST_FILTER_OPERATORS:
                if not isinstance(operand, list):
                    raise MalformedQueryInputError("filter", raw, f"{operator} on {key!r} needs a list")
                _require_scalar_list(key, operand, raw)
            elif operator == "$exists":
                if not isinstance(operand, bool):
                    raise MalformedQueryInputError("filter", raw, f"$exists on {key!r} needs a boolean")
            elif not isinstance(operand, SCALAR_TYPES):
                raise MalformedQueryInputError("filter", raw, f"{operator} on {key!r} needs a scalar")
        return value

    raise MalformedQueryInputError("filter", raw, f"unsupported value for {key!r}")


def _require_scalar_list(key: str, values: list, raw: str) -> None:
    if not all(isinstance(item, SCALAR_TYPES) for item in values):
        raise MalformedQueryInputError("filter", raw, f"list for {key!r} may only hold scalars")
