"""Pagination request entities and enums."""

import re
from dataclasses import dataclass
from typing import Any, Callable, Collection, Dict, Mapping, Optional, Sequence, Tuple, Union
from enum import Enum

from ....config.constants import PaginationDefaults
from ....core.exceptions import PaginationValidationError

# Plain dotted field path; leading "$" and control characters never match
FIELD_PATH_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z0-9_]+)*$")


def is_valid_field_path(name: Any) -> bool:
    """Check a field path is safe to use as a store key."""
    return isinstance(name, str) and FIELD_PATH_PATTERN.match(name) is not None


class SortOrder(str, Enum):
    """Sort order enumeration."""
    ASC = "asc"
    DESC = "desc"
    
    def to_store(self) -> int:
        """Convert to document store direction flag."""
        return 1 if self == SortOrder.ASC else -1
    
    @classmethod
    def parse(cls, value: Union["SortOrder", str, int]) -> "SortOrder":
        """Accept an enum, ``asc``/``desc`` (any case) or a 1/-1 flag."""
        if isinstance(value, SortOrder):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            if value in (1, -1):
                return cls.ASC if value == 1 else cls.DESC
            raise ValueError(f"Invalid sort direction: {value}")
        if isinstance(value, str):
            return cls(value.strip().lower())
        raise ValueError(f"Invalid sort direction: {value!r}")


@dataclass(frozen=True)
class SortField:
    """Sort field specification with validation."""
    
    field: str
    order: SortOrder = SortOrder.ASC
    
    def __post_init__(self):
        """Validate field name for injection prevention."""
        if not is_valid_field_path(self.field):
            raise ValueError(f"Invalid field name: {self.field!r}")
    
    def to_store(self) -> Tuple[str, int]:
        """Convert to a ``(key, direction)`` pair for the store driver."""
        return self.field, self.order.to_store()
    
    @classmethod
    def coerce(cls, value: Union["SortField", Tuple[str, Any]]) -> "SortField":
        """Build from a SortField or a ``(field, direction)`` pair."""
        if isinstance(value, SortField):
            return value
        field_name, direction = value
        return cls(field_name, SortOrder.parse(direction))


@dataclass(frozen=True)
class PaginationRequest:
    """Page-based query request as received on the wire.
    
    ``sort`` is a comma-separated list of ``field:asc|desc`` tokens and
    ``filter`` a JSON-encoded object; both are untrusted caller input and
    are interpreted by the query builder.
    """
    
    page: int = PaginationDefaults.PAGE
    page_size: int = PaginationDefaults.PAGE_SIZE
    sort: Optional[str] = None
    search: Optional[str] = None
    filter: Optional[str] = None
    
    def __post_init__(self):
        """Validate pagination parameters."""
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise ValueError("Page must be an integer >= 1")
        if (
            isinstance(self.page_size, bool)
            or not isinstance(self.page_size, int)
            or self.page_size < PaginationDefaults.MIN_PAGE_SIZE
            or self.page_size > PaginationDefaults.MAX_PAGE_SIZE
        ):
            raise ValueError(
                f"Page size must be between {PaginationDefaults.MIN_PAGE_SIZE} "
                f"and {PaginationDefaults.MAX_PAGE_SIZE}"
            )
    
    @property
    def skip(self) -> int:
        """Number of records to skip for this page."""
        return (self.page - 1) * self.page_size
    
    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size
    
    @classmethod
    def from_query_params(
        cls,
        params: Mapping[str, Any],
        default_page_size: int = PaginationDefaults.PAGE_SIZE,
    ) -> "PaginationRequest":
        """Build from raw query parameters.
        
        Accepts ``pageSize`` or ``page_size``; blank values fall back to
        defaults. Non-numeric or out-of-range page values raise
        PaginationValidationError.
        """
        page = _parse_int(params, "page", PaginationDefaults.PAGE)
        page_size_key = "pageSize" if "pageSize" in params else "page_size"
        page_size = _parse_int(params, page_size_key, default_page_size)
        
        if page < 1:
            raise PaginationValidationError("page", page, "must be >= 1")
        if page_size < PaginationDefaults.MIN_PAGE_SIZE or page_size > PaginationDefaults.MAX_PAGE_SIZE:
            raise PaginationValidationError(
                page_size_key,
                page_size,
                f"must be between {PaginationDefaults.MIN_PAGE_SIZE} and {PaginationDefaults.MAX_PAGE_SIZE}",
            )
        
        return cls(
            page=page,
            page_size=page_size,
            sort=_blank_to_none(params.get("sort")),
            search=_blank_to_none(params.get("search")),
            filter=_blank_to_none(params.get("filter")),
        )


@dataclass(frozen=True)
class QueryOptions:
    """Code-defined query options supplied by domain repositories.
    
    Unlike PaginationRequest these values come from trusted code:
    ``filter`` is merged as-is and ``sort`` is applied after the caller's
    sort tokens.
    """
    
    filter: Optional[Dict[str, Any]] = None
    sort: Sequence[Union[SortField, Tuple[str, Any]]] = ()
    search_fields: Optional[Sequence[str]] = None
    filterable_fields: Optional[Collection[str]] = None
    include_inactive: bool = False
    timeout: Optional[float] = None
    field_mapper: Optional[Callable[[str], str]] = None
    
    def map_field(self, name: str) -> str:
        """Translate a field name to its store key."""
        return self.field_mapper(name) if self.field_mapper else name


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_int(params: Mapping[str, Any], key: str, default: int) -> int:
    raw = _blank_to_none(params.get(key))
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise PaginationValidationError(key, raw, "must be an integer") from e
