"""
Base Pydantic Schemas
Common schemas and base classes for entities and requests
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

ModelT = TypeVar("ModelT", bound=BaseModel)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
        use_enum_values=True
    )


class BaseCreateSchema(BaseSchema):
    """Base schema for creation requests"""
    pass


class BaseUpdateSchema(BaseSchema):
    """Base schema for update requests"""

    def changes(self) -> Dict[str, Any]:
        """Fields explicitly provided by the caller"""
        return {name: getattr(self, name) for name in self.model_fields_set}


def not_null(value: Any) -> Any:
    """Field validator body for update fields whose entity counterpart is required"""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def merge_changes(entity: ModelT, changes: Dict[str, Any]) -> ModelT:
    """
    Apply ``changes`` to ``entity`` and validate the result as a whole.

    Raises:
        pydantic.ValidationError: when the merged record breaks the entity schema
    """
    return type(entity).model_validate({**entity.model_dump(), **changes})


class AuditFields(BaseModel):
    """Mixin for audit stamps set by the service layer"""
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")
    created_by: Optional[str] = Field(None, description="User who created the record")
    updated_by: Optional[str] = Field(None, description="User who last updated the record")


def creation_stamp(actor_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Audit values for a new record: both pairs share one actor and instant"""
    now = now or utcnow()
    return {
        "created_at": now,
        "updated_at": now,
        "created_by": actor_id,
        "updated_by": actor_id,
    }


def update_stamp(actor_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {"updated_at": now or utcnow(), "updated_by": actor_id}


class SearchFilters(BaseSchema):
    """Free-text filter shared by every list operation"""
    search: Optional[str] = Field(None, description="Case-insensitive substring")
