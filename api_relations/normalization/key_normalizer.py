"""Dictionary key normalization for relationship matching."""

from __future__ import annotations

import json
from typing import List, Mapping, Sequence

from api_relations.relations.models import KeyValue, Scalar


class KeyNormalizer:
    """Turn a scalar or composite key value into a stable dictionary key.

    Composite keys are serialized structurally: fields sorted by name, values
    rendered with the scalar rule, encoded as compact JSON pairs. Two composites
    holding the same field/value pairs always produce the same string no matter
    how the mapping was built.
    """

    def __init__(self, case_insensitive: bool = False) -> None:
        self.case_insensitive = case_insensitive

    def normalize(self, value: KeyValue) -> str:
        """Normalize a key value to its dictionary key."""
        if value is None:
            raise ValueError("Cannot build a dictionary key from a null key value")

        if isinstance(value, Mapping):
            return self._normalize_composite(value)

        return self._render(self._fold_case(value))

    def normalize_many(self, values: Sequence[KeyValue]) -> List[str]:
        """Normalize a batch of key values."""
        return [self.normalize(value) for value in values]

    def _normalize_composite(self, value: Mapping[str, Scalar]) -> str:
        pairs = [
            [str(field), self._render(self._fold_case(value[field]))]
            for field in sorted(value, key=str)
        ]
        return json.dumps(pairs, separators=(",", ":"), ensure_ascii=False)

    def _fold_case(self, value: Scalar) -> Scalar:
        if self.case_insensitive and isinstance(value, str):
            return value.lower()
        return value

    def _render(self, value: Scalar) -> str:
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return repr(value)
        if value is None:
            return "null"
        return str(value)
