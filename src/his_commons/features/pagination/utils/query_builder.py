"""Translate pagination requests into document store queries.

Caller input (sort tokens, search term, filter JSON) is untrusted. Bad
sort tokens are skipped one by one; a bad filter is dropped as a whole.
Neither ever fails the request.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ....config.constants import SortDefaults, StoreFields
from ....core.exceptions import MalformedQueryInputError
from ..entities.requests import PaginationRequest, QueryOptions, SortField, SortOrder
from .validation import decode_caller_filter, parse_sort_token

logger = logging.getLogger(__name__)

SortSpec = List[Tuple[str, int]]


def merge_predicates(target: Dict[str, Any], predicate: Mapping[str, Any]) -> Dict[str, Any]:
    """Conjoin ``predicate`` into ``target`` in place.

    Keys not yet present are copied across. A colliding key is appended
    to ``$and`` so a later clause can only narrow the result, never
    replace an earlier condition.
    """
    for key, value in predicate.items():
        if key == "$and":
            target["$and"] = list(target.get("$and", [])) + list(value)
        elif key not in target:
            target[key] = value
        else:
            target["$and"] = list(target.get("$and", [])) + [{key: value}]
    return target


def build_search_predicate(search: Optional[str], options: QueryOptions) -> Optional[Dict[str, Any]]:
    """Case-insensitive substring match over the searchable fields."""
    term = (search or "").strip()
    if not term:
        return None

    fields = [options.map_field(name) for name in options.search_fields or ()]
    if not fields:
        logger.debug(f"Ignoring search term {term!r}: no searchable fields configured")
        return None

    clauses = [{name: {"$regex": re.escape(term), "$options": "i"}} for name in fields]
    if len(clauses) == 1:
        return clauses[0]
    return {"$or": clauses}


def parse_filter(raw: Optional[str], options: QueryOptions) -> Dict[str, Any]:
    """Decode the caller filter, or return ``{}`` if it is unusable."""
    if not raw:
        return {}

    allowed = None
    if options.filterable_fields is not None:
        allowed = {options.map_field(name) for name in options.filterable_fields}

    try:
        return decode_caller_filter(raw, allowed, options.map_field)
    except MalformedQueryInputError as e:
        logger.warning(f"Ignoring caller filter: {e.reason}")
        return {}


def parse_sort(raw: Optional[str]) -> List[SortField]:
    """Parse a ``field:asc,field:desc`` string, skipping bad tokens."""
    if not raw:
        return []

    fields: List[SortField] = []
    for token in raw.split(","):
        if not token.strip():
            continue
        try:
            fields.append(parse_sort_token(token))
        except MalformedQueryInputError as e:
            logger.warning(f"Ignoring sort token {token.strip()!r}: {e.reason}")
    return fields


def build_filter(request: PaginationRequest, options: Optional[QueryOptions] = None) -> Dict[str, Any]:
    """Build the store filter for a paginated query.

    Clauses are conjoined in order: the active-record predicate (unless
    ``include_inactive``), ``options.filter``, the search predicate and
    finally the caller filter.
    """
    options = options or QueryOptions()
    query: Dict[str, Any] = {}

    if not options.include_inactive:
        query[StoreFields.ACTIVE] = True

    if options.filter:
        merge_predicates(query, options.filter)

    search = build_search_predicate(request.search, options)
    if search:
        merge_predicates(query, search)

    caller_filter = parse_filter(request.filter, options)
    if caller_filter:
        merge_predicates(query, caller_filter)

    return query


def build_sort(request: PaginationRequest, options: Optional[QueryOptions] = None) -> SortSpec:
    """Build the store sort specification.

    Caller tokens come first, then ``options.sort`` keys not already
    present, then ``createdAt`` descending and ``_id`` ascending. The
    trailing ``_id`` key keeps page boundaries stable on ties.
    """
    options = options or QueryOptions()
    spec: SortSpec = []
    seen = set()

    def add(sort_field: SortField) -> None:
        key = options.map_field(sort_field.field)
        if key in seen:
            return
        seen.add(key)
        spec.append((key, sort_field.order.to_store()))

    for sort_field in parse_sort(request.sort):
        add(sort_field)
    for item in options.sort:
        add(SortField.coerce(item))

    add(SortField(SortDefaults.FIELD, SortOrder.parse(SortDefaults.DIRECTION)))
    add(SortField(SortDefaults.TIE_BREAK_FIELD, SortOrder.ASC))
    return spec
