"""Application queries (read operations)."""
