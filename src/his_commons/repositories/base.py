"""Generic repository over a document store collection.

``BaseRepository`` is the only component that talks to the store on
behalf of domain code. It keeps the entity invariants around every
operation: soft-delete filtering on listings, audit stamping on every
mutation and immutable identity/creation fields.

Domain repositories subclass it, set ``searchable_fields`` and
``filterable_fields`` and build their own queries on the public API.
"""

import asyncio
import dataclasses
import logging
import time
from typing import (
    Any, ClassVar, Collection, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar, Union
)

from pydantic import BaseModel, ValidationError as SchemaValidationError
from pymongo import ReturnDocument

from ..config.constants import IMMUTABLE_FIELDS, StoreFields
from ..config.settings import get_settings
from ..core.exceptions import EntityNotFoundError, PatchValidationError, QueryTimeoutError
from ..core.shared.context import AuditActor, ContextLike, coerce_context, resolve_audit_actor
from ..features.pagination.entities import (
    PaginationMetadata,
    PaginationRequest,
    PaginationResponse,
    QueryOptions,
    is_valid_field_path,
)
from ..features.pagination.utils import build_filter, build_sort
from ..models.base import BaseEntity
from ..utils.datetime import utc_now
from .protocols import DocumentCollection

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseEntity)


class BaseRepository(Generic[T]):
    """Repository for one entity type backed by one collection.

    Not-found is a normal result (``None``/``False``) everywhere except
    the ``..._or_throw`` variants. Store driver errors are logged and
    propagate unmodified.
    """

    # Fields matched by the ``search`` term of a pagination request
    searchable_fields: ClassVar[Sequence[str]] = ()

    # Fields a caller-supplied filter may reference; None allows any
    filterable_fields: ClassVar[Optional[Collection[str]]] = None

    def __init__(
        self,
        collection: DocumentCollection,
        entity_class: Type[T],
        searchable_fields: Optional[Sequence[str]] = None,
        filterable_fields: Optional[Collection[str]] = None,
        source_system: Optional[str] = None,
    ):
        """Initialize repository.

        Args:
            collection: Store handle bound to the entity's collection
            entity_class: BaseEntity subclass stored in the collection
            searchable_fields: Overrides the class-level searchable fields
            filterable_fields: Overrides the class-level filter whitelist
            source_system: Provenance tag stamped on created records
        """
        if collection is None:
            raise ValueError("Document collection is required")
        self.collection = collection
        self.entity_class = entity_class
        self.source_system = source_system or get_settings().source_system
        if searchable_fields is not None:
            self.searchable_fields = tuple(searchable_fields)
        if filterable_fields is not None:
            self.filterable_fields = frozenset(filterable_fields)

    @property
    def entity_name(self) -> str:
        return self.entity_class.entity_name()

    # Reads

    async def find_by_id(self, entity_id: str) -> Optional[T]:
        """Find a record by id, including soft-deleted ones.

        Args:
            entity_id: Record identifier

        Returns:
            The record, or None if no record has this id
        """
        logger.debug(f"Finding {self.entity_name} by id: {entity_id}")
        try:
            document = await self.collection.find_one({StoreFields.ID: entity_id})
        except Exception as e:
            logger.error(f"Error finding {self.entity_name} by id {entity_id}: {e}")
            raise

        if document is None:
            logger.warning(f"{self.entity_name} not found: {entity_id}")
            return None
        return self._to_entity(document)

    async def find_by_id_or_throw(self, entity_id: str) -> T:
        """Find a record by id.

        Raises:
            EntityNotFoundError: If no record has this id
        """
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    async def find_one(self, filter: Mapping[str, Any]) -> Optional[T]:
        """Find the first record matching a store filter.

        The filter is used exactly as given. No active predicate is
        added, so soft-deleted records match unless the caller scopes
        the filter itself.
        """
        logger.debug(f"Finding one {self.entity_name} with filter: {filter}")
        try:
            document = await self.collection.find_one(dict(filter))
        except Exception as e:
            logger.error(f"Error finding one {self.entity_name}: {e}")
            raise

        if document is None:
            logger.debug(f"No {self.entity_name} matched filter: {filter}")
            return None
        return self._to_entity(document)

    async def find_all(
        self,
        request: PaginationRequest,
        options: Optional[QueryOptions] = None,
    ) -> PaginationResponse[T]:
        """Find one page of records.

        The page query and the count run concurrently against the same
        filter. If either fails, the other is cancelled and the error is
        re-raised unmodified. ``options.timeout`` (or the configured
        ``query_timeout_seconds``) bounds both calls together.

        Args:
            request: Page, page size, sort, search and filter from the caller
            options: Code-defined filter, sort and search configuration

        Returns:
            Page of records, total count and timing metadata

        Raises:
            QueryTimeoutError: If the timeout expires before both calls finish
        """
        options = self._query_options(options)
        query = build_filter(request, options)
        sort = build_sort(request, options)
        timeout = options.timeout if options.timeout is not None else get_settings().query_timeout_seconds

        logger.debug(
            f"Finding {self.entity_name} page {request.page} (size {request.page_size}) "
            f"filter={query} sort={sort}"
        )

        durations: Dict[str, float] = {}
        started = time.perf_counter()

        async def run_find() -> List[Dict[str, Any]]:
            find_started = time.perf_counter()
            cursor = self.collection.find(query, sort=sort, skip=request.skip, limit=request.limit)
            documents = await cursor.to_list(length=request.limit)
            durations["find"] = time.perf_counter() - find_started
            return documents

        async def run_count() -> int:
            count_started = time.perf_counter()
            total = await self.collection.count_documents(query)
            durations["count"] = time.perf_counter() - count_started
            return total

        find_task = asyncio.ensure_future(run_find())
        count_task = asyncio.ensure_future(run_count())
        gathered = asyncio.gather(find_task, count_task)

        try:
            if timeout is not None:
                documents, total = await asyncio.wait_for(gathered, timeout)
            else:
                documents, total = await gathered
        except asyncio.TimeoutError:
            await self._cancel_pending(find_task, count_task)
            if timeout is None:
                raise
            logger.error(f"Listing {self.entity_name} timed out after {timeout}s")
            raise QueryTimeoutError(f"{self.entity_name}.find_all", timeout) from None
        except (Exception, asyncio.CancelledError) as e:
            await self._cancel_pending(find_task, count_task)
            logger.error(f"Error listing {self.entity_name}: {e!r}")
            raise

        metadata = PaginationMetadata.from_durations(
            durations.get("find"),
            durations.get("count"),
            time.perf_counter() - started,
        )

        return PaginationResponse(
            data=[self._to_entity(document) for document in documents],
            page=request.page,
            page_size=request.page_size,
            total=total,
            metadata=metadata,
        )

    async def count(self, filter: Optional[Mapping[str, Any]] = None) -> int:
        """Count records matching a store filter, used exactly as given."""
        logger.debug(f"Counting {self.entity_name} with filter: {filter}")
        try:
            return await self.collection.count_documents(dict(filter or {}))
        except Exception as e:
            logger.error(f"Error counting {self.entity_name}: {e}")
            raise

    async def exists(self, filter: Mapping[str, Any]) -> bool:
        """Check whether any record matches a store filter."""
        return await self.count(filter) > 0

    # Writes

    async def create(self, data: Union[T, Mapping[str, Any]], context: ContextLike = None) -> T:
        """Persist a new record.

        Creation and update timestamps are set to now and the audit
        fields come from the context. ``active`` is kept as given.

        Args:
            data: Entity instance or mapping of its fields
            context: Request context or ``{"user": {...}, "tenantId": ...}``

        Returns:
            The persisted record
        """
        entity = self._coerce_entity(data)
        actor = resolve_audit_actor(context)
        request_context = coerce_context(context)
        now = utc_now()

        changes: Dict[str, Any] = {
            "created_at": now,
            "updated_at": now,
            "created_by": actor.user_id,
            "updated_by": actor.user_id,
            "created_by_name": actor.user_name,
            "updated_by_name": actor.user_name,
        }
        if entity.tenant_id is None and request_context is not None and request_context.tenant_id:
            changes["tenant_id"] = request_context.tenant_id
        if entity.source_system is None and self.source_system:
            changes["source_system"] = self.source_system
        entity = entity.model_copy(update=changes)

        logger.debug(f"Creating {self.entity_name}: {entity.id}")
        try:
            await self.collection.insert_one(entity.to_document())
        except Exception as e:
            logger.error(f"Error creating {self.entity_name} {entity.id}: {e}")
            raise

        logger.info(f"Created {self.entity_name}: {entity.id}")
        return entity

    async def update(
        self,
        entity_id: str,
        patch: Union[BaseModel, Mapping[str, Any]],
        context: ContextLike = None,
    ) -> Optional[T]:
        """Apply a partial update in one atomic store command.

        Patch keys may be attribute names or aliases. Identity and
        creation fields are dropped with a warning. ``updatedAt`` and the
        updater fields are stamped on every call, even for an empty patch.

        Returns:
            The record after the update, or None if no record has this id

        Raises:
            PatchValidationError: If a patch value does not fit its field
        """
        changes = self._translate_patch(patch)
        changes.update(self._update_stamp(resolve_audit_actor(context)))

        logger.debug(f"Updating {self.entity_name} {entity_id}: {sorted(changes)}")
        document = await self._find_and_set(entity_id, changes, "updating")
        if document is None:
            logger.warning(f"{self.entity_name} not found for update: {entity_id}")
            return None
        return self._to_entity(document)

    async def update_or_throw(
        self,
        entity_id: str,
        patch: Union[BaseModel, Mapping[str, Any]],
        context: ContextLike = None,
    ) -> T:
        """Apply a partial update.

        Raises:
            EntityNotFoundError: If no record has this id
        """
        entity = await self.update(entity_id, patch, context)
        if entity is None:
            raise EntityNotFoundError(self.entity_name, entity_id)
        return entity

    async def delete(self, entity_id: str, context: ContextLike = None) -> bool:
        """Soft delete a record by marking it inactive.

        Deleting an already inactive record succeeds again and refreshes
        the updater stamp.

        Returns:
            True if the record exists, False otherwise
        """
        changes = {StoreFields.ACTIVE: False}
        changes.update(self._update_stamp(resolve_audit_actor(context)))

        logger.debug(f"Soft deleting {self.entity_name}: {entity_id}")
        document = await self._find_and_set(entity_id, changes, "deleting")
        if document is None:
            logger.warning(f"{self.entity_name} not found for delete: {entity_id}")
            return False

        logger.info(f"Soft deleted {self.entity_name}: {entity_id}")
        return True

    async def restore(self, entity_id: str, context: ContextLike = None) -> bool:
        """Reactivate a soft-deleted record.

        Returns:
            True if the record exists, False otherwise
        """
        changes = {StoreFields.ACTIVE: True}
        changes.update(self._update_stamp(resolve_audit_actor(context)))

        logger.debug(f"Restoring {self.entity_name}: {entity_id}")
        document = await self._find_and_set(entity_id, changes, "restoring")
        if document is None:
            logger.warning(f"{self.entity_name} not found for restore: {entity_id}")
            return False

        logger.info(f"Restored {self.entity_name}: {entity_id}")
        return True

    async def hard_delete(self, entity_id: str) -> bool:
        """Physically remove a record. No audit stamping is done.

        Returns:
            True if a record was removed, False if none had this id
        """
        logger.debug(f"Hard deleting {self.entity_name}: {entity_id}")
        try:
            document = await self.collection.find_one_and_delete({StoreFields.ID: entity_id})
        except Exception as e:
            logger.error(f"Error hard deleting {self.entity_name} {entity_id}: {e}")
            raise

        if document is None:
            logger.warning(f"{self.entity_name} not found for hard delete: {entity_id}")
            return False

        logger.info(f"Hard deleted {self.entity_name}: {entity_id}")
        return True

    # Helpers

    def _to_entity(self, document: Mapping[str, Any]) -> T:
        return self.entity_class.from_document(document)

    def _coerce_entity(self, data: Union[T, Mapping[str, Any]]) -> T:
        if isinstance(data, self.entity_class):
            return data.model_copy(deep=True)
        if isinstance(data, BaseEntity):
            return self.entity_class.model_validate(data.model_dump())
        return self.entity_class.from_document(data)

    def _query_options(self, options: Optional[QueryOptions]) -> QueryOptions:
        """Fill unset options from the repository defaults."""
        options = options or QueryOptions()
        return dataclasses.replace(
            options,
            search_fields=(
                options.search_fields if options.search_fields is not None else tuple(self.searchable_fields)
            ),
            filterable_fields=(
                options.filterable_fields if options.filterable_fields is not None else self.filterable_fields
            ),
            field_mapper=options.field_mapper or self.entity_class.store_key,
        )

    def _translate_patch(self, patch: Union[BaseModel, Mapping[str, Any]]) -> Dict[str, Any]:
        """Map patch keys to store keys and validate their values.

        Immutable, unknown and malformed keys are dropped with a warning.
        Dotted paths are kept when their first segment is a declared field.

        Raises:
            PatchValidationError: If a value does not fit its field
        """
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)

        changes: Dict[str, Any] = {}
        for key, value in patch.items():
            if not is_valid_field_path(key):
                logger.warning(f"Ignoring invalid {self.entity_name} patch key: {key!r}")
                continue
            store_key = self.entity_class.store_key(key)
            if store_key in IMMUTABLE_FIELDS:
                logger.warning(f"Ignoring immutable {self.entity_name} field in patch: {key}")
                continue

            head, dot, _ = key.partition(".")
            field_name = self.entity_class.resolve_field(head)
            if field_name is None:
                logger.warning(f"Ignoring unknown {self.entity_name} field in patch: {key}")
                continue

            if dot:
                if isinstance(value, BaseModel):
                    value = value.model_dump(by_alias=True)
            else:
                try:
                    value = self.entity_class.validate_field_value(field_name, value)
                except SchemaValidationError as e:
                    reason = "; ".join(error["msg"] for error in e.errors())
                    raise PatchValidationError(self.entity_name, key, value, reason) from e
            changes[store_key] = value
        return changes

    @staticmethod
    def _update_stamp(actor: AuditActor) -> Dict[str, Any]:
        return {
            StoreFields.UPDATED_AT: utc_now(),
            StoreFields.UPDATED_BY: actor.user_id,
            StoreFields.UPDATED_BY_NAME: actor.user_name,
        }

    async def _find_and_set(
        self,
        entity_id: str,
        changes: Dict[str, Any],
        action: str,
    ) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one_and_update(
                {StoreFields.ID: entity_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except Exception as e:
            logger.error(f"Error {action} {self.entity_name} {entity_id}: {e}")
            raise

    @staticmethod
    async def _cancel_pending(*tasks: "asyncio.Future[Any]") -> None:
        """Cancel unfinished tasks and wait for them to settle."""
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
