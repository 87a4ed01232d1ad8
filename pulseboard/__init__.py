"""Pulseboard: watchlist analytics over unreliable market-data feeds."""

__version__ = "0.1.0"
