"""API-backed relationship with batch (eager) and lazy loading."""

from __future__ import annotations

from typing import Any, List, Sequence

from loguru import logger

from api_relations.normalization.key_collector import KeyCollector
from api_relations.normalization.key_normalizer import KeyNormalizer
from api_relations.relations.accessor import MappingAccessor, RecordAccessor
from api_relations.relations.errors import MissingFetchFunctionError
from api_relations.relations.matcher import Matcher
from api_relations.relations.models import KeyValue, RelationKind, RelationSpec
from api_relations.relations.result_indexer import ResultIndexer


class ApiRelation:
    """Resolve a relationship by calling a fetch function instead of a join.

    Eager loading calls :meth:`init_relation` and then :meth:`match` on the
    whole batch of parents, which issues exactly one fetch for every distinct
    key. Lazy loading goes through :meth:`get_results` for a single parent.
    Neither path catches errors raised by the fetch function.
    """

    def __init__(self, spec: RelationSpec, accessor: RecordAccessor | None = None) -> None:
        self.spec = spec
        self.accessor = accessor or MappingAccessor()
        self.normalizer = KeyNormalizer(case_insensitive=spec.case_insensitive)
        self.collector = KeyCollector(self.accessor)
        self.indexer = ResultIndexer(self.normalizer, self.collector)
        self.matcher = Matcher(self.normalizer, self.accessor)

    @property
    def kind(self) -> RelationKind:
        return self.spec.kind

    def default(self) -> Any:
        return self.spec.default()

    def init_relation(self, parents: Sequence[Any], relation: str) -> Sequence[Any]:
        """Attach the default value to every parent before matching."""
        for parent in parents:
            self.accessor.set_relation(parent, relation, self.default())
        return parents

    def match(self, parents: Sequence[Any], relation: str) -> Sequence[Any]:
        """Batch-load the relation for all parents with a single fetch."""
        keys = self.collector.collect(parents, self.spec.local_key)
        if not keys:
            logger.debug("No keys to fetch for relation '{}'; skipping fetch", relation)
            return parents

        results = self.execute_fetch(keys)
        index = self.indexer.index(self.kind, results, self.spec.foreign_key)
        return self.matcher.match(self.kind, parents, index, self.spec.local_key, relation)

    def get_results(self, parent: Any) -> Any:
        """Lazy-load the relation for one parent."""
        key_value = self.collector.key_value(parent, self.spec.local_key)
        if key_value is None:
            return self.default()

        results = self.execute_fetch([key_value])
        index = self.indexer.index(self.kind, results, self.spec.foreign_key)
        found = index.get(self.normalizer.normalize(key_value))
        return self.default() if found is None else found

    def resolve_one(self, parent: Any) -> Any:
        self._require_kind(RelationKind.HAS_ONE)
        return self.get_results(parent)

    def resolve_many(self, parent: Any) -> List[Any]:
        self._require_kind(RelationKind.HAS_MANY)
        return self.get_results(parent)

    def execute_fetch(self, keys: List[KeyValue]) -> List[Any]:
        """Call the fetch function with the collected keys."""
        if self.spec.fetch is None:
            raise MissingFetchFunctionError("API fetch function is not defined")

        logger.debug(
            "Fetching {} relation for {} key(s) on {}",
            self.kind.value,
            len(keys),
            self.spec.foreign_key,
        )
        results = self.spec.fetch(keys, self.spec.foreign_key)
        if results is None:
            return []
        return list(results)

    def _require_kind(self, kind: RelationKind) -> None:
        if self.kind is not kind:
            raise ValueError(f"Relation is {self.kind.value}, not {kind.value}")
