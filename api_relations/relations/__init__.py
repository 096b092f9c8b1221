"""API-backed relationship definitions, indexing and matching."""
