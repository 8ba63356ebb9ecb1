"""Crosstabber: analysis engine for market-research crosstabs."""

__version__ = "0.1.0"
