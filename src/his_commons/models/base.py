"""
Base models for stored entities.

Every domain record extends ``BaseEntity``. Python attributes are
snake_case while stored documents and API payloads use camelCase
aliases; the identity is kept under ``_id`` in the document store and
exposed as ``id`` everywhere else.
"""
from typing import Optional, Any, Dict, ClassVar, Mapping, Annotated
from enum import Enum
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from ..config.constants import StoreFields
from ..utils.datetime import normalize_store_datetime
from ..utils.uuid import generate_uuid_v4


class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="ignore",
    )
    
    @field_validator("*", mode="after")
    @classmethod
    def normalize_datetimes(cls, v: Any) -> Any:
        """Store round trips drop tz info and sub-millisecond precision."""
        if isinstance(v, datetime):
            return normalize_store_datetime(v)
        return v


class BaseEntity(BaseSchema):
    """Abstract base record shape shared by all domain entities.
    
    Carries identity, soft-delete flag, audit trail, tenancy and
    provenance tags, an optional version counter and a free-form
    extensions bag.
    """
    
    # Collection holding this entity, set by domain subclasses
    collection_name: ClassVar[Optional[str]] = None
    
    id: str = Field(default_factory=generate_uuid_v4, description="Unique identifier for the entity")
    active: bool = Field(default=True, description="Whether the entity is active")
    
    # Audit fields
    created_at: Optional[datetime] = Field(default=None, description="When the entity was created")
    updated_at: Optional[datetime] = Field(default=None, description="When the entity was last updated")
    created_by: Optional[str] = Field(default=None, description="User who created the entity")
    updated_by: Optional[str] = Field(default=None, description="User who last updated the entity")
    created_by_name: Optional[str] = Field(default=None, description="Name of the user who created the entity")
    updated_by_name: Optional[str] = Field(default=None, description="Name of the user who last updated the entity")
    
    # Tenancy and provenance, passed through untouched
    tenant_id: Optional[str] = Field(default=None, description="Tenant identifier for multi-tenancy")
    source_system: Optional[str] = Field(default=None, description="Source system identifier")
    
    version: Optional[int] = Field(default=None, description="Optimistic concurrency counter")
    extensions: Dict[str, Any] = Field(default_factory=dict, description="Additional metadata and extensions")
    
    @property
    def is_deleted(self) -> bool:
        """Check if entity is soft deleted."""
        return not self.active
    
    @classmethod
    def entity_name(cls) -> str:
        """Human-readable entity type used in logs and errors."""
        return cls.__name__
    
    @classmethod
    def store_key(cls, name: str) -> str:
        """Map an attribute name or alias to its document store key.
        
        Dotted paths are mapped on their first segment only, so
        ``extensions.code`` and ``address.city`` keep their tail.
        """
        head, dot, tail = name.partition(".")
        if head in ("id", StoreFields.ID):
            key = StoreFields.ID
        else:
            field = cls.model_fields.get(head)
            key = field.alias if field is not None and field.alias else head
        return f"{key}{dot}{tail}"

    @classmethod
    def resolve_field(cls, name: str) -> Optional[str]:
        """Return the attribute name declared under ``name`` or its alias."""
        if name in cls.model_fields:
            return name
        for attr, field in cls.model_fields.items():
            if field.alias == name:
                return attr
        return None

    @classmethod
    def validate_field_value(cls, name: str, value: Any) -> Any:
        """Validate one attribute value and return it in store shape.

        Raises:
            pydantic.ValidationError: If the value does not fit the field
        """
        field = cls.model_fields[name]
        annotation = Annotated[(field.annotation, *field.metadata)] if field.metadata else field.annotation
        value = TypeAdapter(annotation).validate_python(value)
        if isinstance(value, datetime):
            return normalize_store_datetime(value)
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, BaseModel):
            return value.model_dump(by_alias=True)
        return value

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the document store shape."""
        document = self.model_dump(by_alias=True)
        document[StoreFields.ID] = document.pop("id")
        return document
    
    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "BaseEntity":
        """Build an entity from a stored document."""
        data = dict(document)
        if StoreFields.ID in data:
            data["id"] = str(data.pop(StoreFields.ID))
        return cls.model_validate(data)
    
    def to_response(self) -> Dict[str, Any]:
        """Serialize to the camelCase wire shape."""
        return self.model_dump(by_alias=True, mode="json")
