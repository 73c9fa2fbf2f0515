"""Compact read-only proxy for Cartola FC market data."""
