"""Host model glue."""

from api_relations.orm.api_model import ApiModel

__all__ = ["ApiModel"]
