"""Index fetched records by normalized foreign key."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from loguru import logger

from api_relations.normalization.key_collector import KeyCollector
from api_relations.normalization.key_normalizer import KeyNormalizer
from api_relations.relations.models import KeyFields, RelationKind


class ResultIndexer:
    """Build lookup dictionaries from a fetch response.

    Has-one indexes keep the first record seen for a dictionary key; later
    duplicates in the response are ignored. Has-many indexes keep every record
    in response order.
    """

    def __init__(
        self,
        normalizer: KeyNormalizer | None = None,
        collector: KeyCollector | None = None,
    ) -> None:
        self.normalizer = normalizer or KeyNormalizer()
        self.collector = collector or KeyCollector()

    def index(self, kind: RelationKind, records: Iterable[Any], foreign_key: KeyFields) -> Dict[str, Any]:
        if kind is RelationKind.HAS_MANY:
            return self.index_many(records, foreign_key)
        return self.index_one(records, foreign_key)

    def index_one(self, records: Iterable[Any], foreign_key: KeyFields) -> Dict[str, Any]:
        dictionary: Dict[str, Any] = {}
        dropped = 0
        for record in records:
            dictionary_key = self._dictionary_key(record, foreign_key)
            if dictionary_key is None:
                dropped += 1
                continue
            dictionary.setdefault(dictionary_key, record)

        self._log_index("has-one", dictionary, dropped)
        return dictionary

    def index_many(self, records: Iterable[Any], foreign_key: KeyFields) -> Dict[str, List[Any]]:
        dictionary: Dict[str, List[Any]] = {}
        dropped = 0
        for record in records:
            dictionary_key = self._dictionary_key(record, foreign_key)
            if dictionary_key is None:
                dropped += 1
                continue
            dictionary.setdefault(dictionary_key, []).append(record)

        self._log_index("has-many", dictionary, dropped)
        return dictionary

    def _dictionary_key(self, record: Any, foreign_key: KeyFields) -> str | None:
        key_value = self.collector.key_value_from_data(record, foreign_key)
        if key_value is None:
            return None
        return self.normalizer.normalize(key_value)

    def _log_index(self, label: str, dictionary: Dict[str, Any], dropped: int) -> None:
        logger.debug("Built {} index with {} key(s)", label, len(dictionary))
        if dropped:
            logger.debug("Dropped {} fetched record(s) without a usable foreign key", dropped)
