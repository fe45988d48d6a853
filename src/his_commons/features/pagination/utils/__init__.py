"""Query building helpers for paginated repositories."""

from .query_builder import (
    SortSpec,
    merge_predicates,
    build_search_predicate,
    parse_filter,
    parse_sort,
    build_filter,
    build_sort,
)

from .validation import (
    parse_sort_token,
    decode_caller_filter,
    validate_filter_value,
)

__all__ = [
    "SortSpec",
    "merge_predicates",
    "build_search_predicate",
    "parse_filter",
    "parse_sort",
    "build_filter",
    "build_sort",
    "parse_sort_token",
    "decode_caller_filter",
    "validate_filter_value",
]
