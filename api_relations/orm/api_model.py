"""Minimal host model exposing API relationships.

Subclasses declare relationships as methods returning an :class:`ApiRelation`,
for example::

    class User(ApiModel):
        def profile(self) -> ApiRelation:
            return self.has_one_api(fetch_profiles, "user_id")

``user.get_relation_value("profile")`` loads lazily, while
``User.eager_load(users, "profile")`` resolves the whole batch with one fetch.
"""

from __future__ import annotations

import inspect
from typing import Any, ClassVar, Dict, Mapping, Sequence

from loguru import logger

from api_relations.relations.accessor import ModelAccessor
from api_relations.relations.api_relation import ApiRelation
from api_relations.relations.models import FetchFn, KeyFields, RelationKind, RelationSpec
from api_relations.utils.config import RelationsConfig, relations_defaults


class ApiModel:
    """Attribute bag with a relation cache and API relationship factories."""

    relations_config: ClassVar[RelationsConfig | None] = None

    def __init__(self, attributes: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        self._attributes: Dict[str, Any] = {**(attributes or {}), **kwargs}
        self._relations: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"

    # Attributes
    def get_attribute(self, name: str) -> Any:
        return self._attributes.get(name)

    def set_attribute(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    # Relations
    def set_relation(self, name: str, value: Any) -> None:
        self._relations[name] = value

    def get_relation(self, name: str) -> Any:
        """Return an already loaded relation value."""
        if name not in self._relations:
            raise KeyError(f"Relation '{name}' has not been loaded on {type(self).__name__}")
        return self._relations[name]

    def relation_loaded(self, name: str) -> bool:
        return name in self._relations

    def get_relation_value(self, name: str) -> Any:
        """Return a relation, lazy-loading and caching it on first access."""
        if name in self._relations:
            return self._relations[name]

        value = self._relation(name).get_results(self)
        self._relations[name] = value
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {**self._attributes, **self._relations}

    # Relationship factories
    def has_one_api(
        self,
        fetch: FetchFn | None,
        foreign_key: KeyFields,
        local_key: KeyFields | None = None,
        case_insensitive: bool | None = None,
    ) -> ApiRelation:
        """Define a has-one relationship resolved through ``fetch``."""
        return self._new_relation(RelationKind.HAS_ONE, fetch, foreign_key, local_key, case_insensitive)

    def has_many_api(
        self,
        fetch: FetchFn | None,
        foreign_key: KeyFields,
        local_key: KeyFields | None = None,
        case_insensitive: bool | None = None,
    ) -> ApiRelation:
        """Define a has-many relationship resolved through ``fetch``."""
        return self._new_relation(RelationKind.HAS_MANY, fetch, foreign_key, local_key, case_insensitive)

    @classmethod
    def eager_load(cls, models: Sequence["ApiModel"], *names: str) -> Sequence["ApiModel"]:
        """Load the named relations for every model, one fetch per relation."""
        if not models:
            return models

        for name in names:
            relation = models[0]._relation(name)
            logger.debug("Eager loading '{}' for {} model(s)", name, len(models))
            local_key = relation.spec.local_key
            keyless = [m for m in models if relation.collector.key_value(m, local_key) is None]
            relation.match(models, name)
            # Defaults are attached only once the fetch succeeded; a keyless batch skips match.
            relation.init_relation(keyless, name)
        return models

    def _new_relation(
        self,
        kind: RelationKind,
        fetch: FetchFn | None,
        foreign_key: KeyFields,
        local_key: KeyFields | None,
        case_insensitive: bool | None,
    ) -> ApiRelation:
        defaults = self.relations_config or relations_defaults()
        spec = RelationSpec(
            kind=kind,
            foreign_key=foreign_key,
            local_key=local_key if local_key is not None else defaults.default_local_key,
            fetch=fetch,
            case_insensitive=(
                case_insensitive if case_insensitive is not None else defaults.case_insensitive
            ),
        )
        return ApiRelation(spec, accessor=ModelAccessor())

    def _relation(self, name: str) -> ApiRelation:
        factory = getattr(self, name, None)
        if not callable(factory) or not _takes_no_arguments(factory):
            raise AttributeError(f"{type(self).__name__} has no relationship '{name}'")
        relation = factory()
        if not isinstance(relation, ApiRelation):
            raise AttributeError(
                f"{type(self).__name__}.{name}() did not return an ApiRelation"
            )
        return relation


def _takes_no_arguments(factory: Any) -> bool:
    try:
        parameters = inspect.signature(factory).parameters.values()
    except (TypeError, ValueError):
        return False
    return all(
        p.default is not p.empty or p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
        for p in parameters
    )
