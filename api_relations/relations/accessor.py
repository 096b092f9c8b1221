"""Record accessors bridging host records and the matching core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, MutableMapping, Protocol, runtime_checkable

from api_relations.relations.models import Scalar

if TYPE_CHECKING:
    from api_relations.orm.api_model import ApiModel


@runtime_checkable
class RecordAccessor(Protocol):
    """How the core reads parent fields and attaches relation values."""

    def get_field(self, record: Any, name: str) -> Scalar:
        ...

    def set_relation(self, parent: Any, relation: str, value: Any) -> None:
        ...


class MappingAccessor:
    """Parents are mutable mappings; relations are stored under their name."""

    def get_field(self, record: MutableMapping[str, Any], name: str) -> Scalar:
        return record.get(name)

    def set_relation(self, parent: MutableMapping[str, Any], relation: str, value: Any) -> None:
        parent[relation] = value


class ModelAccessor:
    """Parents are :class:`ApiModel` instances."""

    def get_field(self, record: "ApiModel", name: str) -> Scalar:
        return record.get_attribute(name)

    def set_relation(self, parent: "ApiModel", relation: str, value: Any) -> None:
        parent.set_relation(relation, value)
