"""Lexicon-based sentiment scoring."""

from .scorer import (
    Lexicon,
    SentimentScorer,
    aggregate,
    get_default_scorer,
    load_default_lexicon,
    score_sentiment,
    score_text,
)

__all__ = [
    "Lexicon",
    "SentimentScorer",
    "aggregate",
    "get_default_scorer",
    "load_default_lexicon",
    "score_sentiment",
    "score_text",
]
