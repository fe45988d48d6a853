"""Store driver boundary required by the repository layer.

A motor ``AsyncIOMotorCollection`` satisfies this protocol; tests use
an in-memory collection with the same surface.
"""

from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class DocumentCursor(Protocol):
    """Cursor returned by ``find``."""
    
    async def to_list(self, length: Optional[int]) -> List[Dict[str, Any]]:
        """Exhaust the cursor into a list of documents."""
        ...


@runtime_checkable
class DocumentCollection(Protocol):
    """Handle bound to one collection of one entity type."""
    
    def find(
        self,
        filter: Mapping[str, Any],
        *,
        sort: Optional[List[Tuple[str, int]]] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> DocumentCursor:
        """Filtered find with sort, skip and limit."""
        ...
    
    async def find_one(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first matching document or None."""
        ...
    
    async def count_documents(self, filter: Mapping[str, Any]) -> int:
        """Count matching documents."""
        ...
    
    async def insert_one(self, document: Mapping[str, Any]) -> Any:
        """Insert a single document."""
        ...
    
    async def find_one_and_update(
        self,
        filter: Mapping[str, Any],
        update: Mapping[str, Any],
        **kwargs: Any,
    ) -> Optional[Dict[str, Any]]:
        """Atomically update one document and return it."""
        ...
    
    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Atomically remove one document and return it."""
        ...
