"""FastAPI dependency reading the pagination wire parameters."""

from typing import Optional

from fastapi import Query

from ...config.constants import PaginationDefaults
from ...config.settings import get_settings
from .entities import PaginationRequest


def pagination_params(
    page: int = Query(PaginationDefaults.PAGE, ge=1, description="Page number (1-based)"),
    page_size: Optional[int] = Query(
        None,
        alias="pageSize",
        ge=PaginationDefaults.MIN_PAGE_SIZE,
        le=PaginationDefaults.MAX_PAGE_SIZE,
        description="Records per page",
    ),
    sort: Optional[str] = Query(None, description="Comma-separated field:asc|desc tokens"),
    search: Optional[str] = Query(None, description="Case-insensitive search term"),
    filter: Optional[str] = Query(None, description="JSON-encoded filter object"),
) -> PaginationRequest:
    """Build a PaginationRequest from query parameters.
    
    Usage:
        @router.get("/patients")
        async def list_patients(
            pagination: PaginationRequest = Depends(pagination_params)
        ):
            response = await repository.find_all(pagination)
            return response.to_dict()
    """
    if page_size is None:
        page_size = get_settings().default_page_size
    
    return PaginationRequest(
        page=page,
        page_size=page_size,
        sort=sort or None,
        search=search or None,
        filter=filter or None,
    )
