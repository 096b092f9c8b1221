"""Batch-loaded ORM relationships backed by external API calls."""

from api_relations.orm.api_model import ApiModel
from api_relations.relations.api_relation import ApiRelation
from api_relations.relations.errors import ApiRelationError, MissingFetchFunctionError
from api_relations.relations.models import RelationKind, RelationSpec

__version__ = "0.1.0"

__all__ = [
    "ApiModel",
    "ApiRelation",
    "ApiRelationError",
    "MissingFetchFunctionError",
    "RelationKind",
    "RelationSpec",
    "__version__",
]
