"""Normalization package."""

from api_relations.normalization.key_collector import KeyCollector
from api_relations.normalization.key_normalizer import KeyNormalizer

__all__ = [
    "KeyCollector",
    "KeyNormalizer",
]
