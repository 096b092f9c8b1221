"""Key extraction and deduplication for batch relationship loading."""

from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, List, Mapping

from loguru import logger

from api_relations.relations.accessor import MappingAccessor, RecordAccessor
from api_relations.relations.models import CompositeKey, KeyFields, KeyValue, is_composite

_MISSING = object()


class KeyCollector:
    """Collect the distinct key values a batch of parents needs fetched."""

    def __init__(self, accessor: RecordAccessor | None = None) -> None:
        self.accessor = accessor or MappingAccessor()

    def collect(self, records: Iterable[Any], key_fields: KeyFields) -> List[KeyValue]:
        """Return deduplicated, non-null key values in first-seen order.

        Single keys are deduplicated by raw value, so case-insensitive matching
        never collapses two differently cased keys sent to the fetch function.
        Composite keys are deduplicated by their field/value pairs.
        """
        records = list(records)
        seen: Dict[Hashable, KeyValue] = {}
        for record in records:
            value = self.key_value(record, key_fields)
            if value is None:
                continue
            marker = self._identity(value)
            if marker not in seen:
                seen[marker] = value

        keys = list(seen.values())
        logger.debug(
            "Collected {} distinct key(s) on {} from {} record(s)",
            len(keys),
            key_fields,
            len(records),
        )
        return keys

    def key_value(self, record: Any, key_fields: KeyFields) -> KeyValue:
        """Key value of a parent record; ``None`` if any key field is null."""
        if not is_composite(key_fields):
            return self.accessor.get_field(record, key_fields)

        values: CompositeKey = {}
        for field in key_fields:
            value = self.accessor.get_field(record, field)
            if value is None:
                return None
            values[field] = value
        return values

    def key_value_from_data(self, data: Any, key_fields: KeyFields) -> KeyValue:
        """Key value of a fetched record; ``None`` if any key field is absent."""
        if not is_composite(key_fields):
            value = _read(data, key_fields)
            return None if value is _MISSING else value

        values: CompositeKey = {}
        for field in key_fields:
            value = _read(data, field)
            if value is _MISSING or value is None:
                return None
            values[field] = value
        return values

    def _identity(self, value: KeyValue) -> Hashable:
        if isinstance(value, Mapping):
            return tuple((field, type(item), item) for field, item in value.items())
        # True, 1 and 1.0 hash alike but are distinct raw keys.
        return (type(value), value)


def _read(data: Any, field: str) -> Any:
    """Read a field from a fetched record, mapping or object."""
    if isinstance(data, Mapping):
        return data.get(field, _MISSING)
    return getattr(data, field, _MISSING)
