"""Attach indexed fetch results to their parent records."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from api_relations.normalization.key_collector import KeyCollector
from api_relations.normalization.key_normalizer import KeyNormalizer
from api_relations.relations.accessor import MappingAccessor, RecordAccessor
from api_relations.relations.models import KeyFields, RelationKind


class Matcher:
    """Walk parents in order and attach the matched value or the default."""

    def __init__(
        self,
        normalizer: KeyNormalizer | None = None,
        accessor: RecordAccessor | None = None,
    ) -> None:
        self.normalizer = normalizer or KeyNormalizer()
        self.accessor = accessor or MappingAccessor()
        self._collector = KeyCollector(self.accessor)

    def match(
        self,
        kind: RelationKind,
        parents: Sequence[Any],
        index: Dict[str, Any],
        local_key: KeyFields,
        relation: str,
    ) -> Sequence[Any]:
        for parent in parents:
            found = self.lookup(parent, index, local_key)
            if found is None:
                value = kind.default()
            elif kind is RelationKind.HAS_MANY:
                # parents sharing a key get their own list
                value = list(found)
            else:
                value = found
            self.accessor.set_relation(parent, relation, value)
        return parents

    def match_one(
        self, parents: Sequence[Any], index: Dict[str, Any], local_key: KeyFields, relation: str
    ) -> Sequence[Any]:
        """Attach the matched record, or ``None``, to each parent."""
        return self.match(RelationKind.HAS_ONE, parents, index, local_key, relation)

    def match_many(
        self,
        parents: Sequence[Any],
        index: Dict[str, List[Any]],
        local_key: KeyFields,
        relation: str,
    ) -> Sequence[Any]:
        """Attach the matched records, or an empty list, to each parent."""
        return self.match(RelationKind.HAS_MANY, parents, index, local_key, relation)

    def lookup(self, parent: Any, index: Dict[str, Any], local_key: KeyFields) -> Any:
        """Indexed value for the parent's key, ``None`` when absent or unmatched."""
        key_value = self._collector.key_value(parent, local_key)
        if key_value is None:
            return None
        return index.get(self.normalizer.normalize(key_value))
