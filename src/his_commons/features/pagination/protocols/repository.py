"""Repository protocols for pagination support."""

from typing import Optional, Protocol, TypeVar, runtime_checkable

from ..entities import PaginationRequest, PaginationResponse, QueryOptions

T = TypeVar('T')


@runtime_checkable
class PaginatedRepository(Protocol[T]):
    """Protocol for repositories that support page-based listing."""
    
    async def find_all(
        self,
        request: PaginationRequest,
        options: Optional[QueryOptions] = None,
    ) -> PaginationResponse[T]:
        """Find one page of active records.
        
        Args:
            request: Page, page size, sort, search and filter from the caller
            options: Code-defined filter, sort and search configuration
            
        Returns:
            Page of records with total count and page information
        """
        ...
    
    async def count(self, filter: Optional[dict] = None) -> int:
        """Count records matching a store filter as given."""
        ...
