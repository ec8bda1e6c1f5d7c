"""Application layer: commands, queries and the banking service facade."""
