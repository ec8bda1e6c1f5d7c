"""Infrastructure adapters: aggregator integration and persistence."""
