"""Ports (interfaces) for banking domain."""

from vita.domain.banking.ports.aggregator_port import AggregatorPort

__all__ = ["AggregatorPort"]
