"""Banking domain package.

This package contains the domain model for open-banking aggregation:
bank connections, the accounts discovered under them, and the bank-sourced
transactions synced from the aggregator.
"""
