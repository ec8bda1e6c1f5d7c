"""Application commands (write operations)."""
