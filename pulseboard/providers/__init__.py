"""HTTP clients for the upstream market-data and text providers."""

from .alpha_vantage import AlphaVantageClient, AlphaVantageError
from .finnhub import FinnhubClient, FinnhubError
from .reddit import RedditClient, RedditError, build_search_query

__all__ = [
    "AlphaVantageClient",
    "AlphaVantageError",
    "FinnhubClient",
    "FinnhubError",
    "RedditClient",
    "RedditError",
    "build_search_query",
]
