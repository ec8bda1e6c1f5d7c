"""Vita - bank connection and transaction sync for the personal tracker."""
