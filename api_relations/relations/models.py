"""Shared types for API-backed relationships."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

Scalar = Union[str, int, float, bool, None]
Record = Mapping[str, Any]
CompositeKey = Dict[str, Scalar]
KeyValue = Union[Scalar, CompositeKey]
KeyFields = Union[str, List[str]]
FetchFn = Callable[[List[KeyValue], KeyFields], Optional[Iterable[Any]]]


class RelationKind(str, Enum):
    """Cardinality of an API relationship."""

    HAS_ONE = "has_one"
    HAS_MANY = "has_many"

    def default(self) -> Any:
        """Value attached to a parent when nothing matches."""
        if self is RelationKind.HAS_MANY:
            return []
        return None


def is_composite(key_fields: KeyFields) -> bool:
    return isinstance(key_fields, list)


class RelationSpec(BaseModel):
    """Configuration for one API relationship.

    ``foreign_key`` names the field(s) in fetched records, ``local_key`` the
    field(s) on the parent. ``fetch`` receives the deduplicated key list and the
    foreign key definition and returns the related records.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: RelationKind
    foreign_key: KeyFields
    local_key: KeyFields = "id"
    fetch: Optional[FetchFn] = None
    case_insensitive: bool = False

    @field_validator("foreign_key", "local_key")
    @classmethod
    def _validate_key_fields(cls, value: KeyFields) -> KeyFields:
        if isinstance(value, str):
            if not value:
                raise ValueError("Key field name must not be empty")
            return value
        fields = list(value)
        if not fields:
            raise ValueError("Composite key must name at least one field")
        if any(not isinstance(field, str) or not field for field in fields):
            raise ValueError("Composite key fields must be non-empty strings")
        return fields

    @model_validator(mode="after")
    def _validate_key_shapes(self) -> "RelationSpec":
        foreign_composite = is_composite(self.foreign_key)
        local_composite = is_composite(self.local_key)
        if foreign_composite != local_composite:
            raise ValueError(
                "foreign_key and local_key must both be single fields or both composite"
            )
        if foreign_composite and len(self.foreign_key) != len(self.local_key):
            raise ValueError(
                f"Composite key size mismatch: foreign_key has {len(self.foreign_key)} "
                f"fields, local_key has {len(self.local_key)}"
            )
        return self

    def default(self) -> Any:
        return self.kind.default()
