"""Deterministic lexicon sentiment scoring with trimmed-mean aggregation."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from types import MappingProxyType
from typing import Iterable, Mapping

from pydantic import BaseModel, Field

from pulseboard.models import SentimentSample

# Swedish letters are kept so bilingual headlines score on both vocabularies.
_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9åäöéü\s\-]")
_MIN_DAMPING = 5.0
_DEFAULT_TRIM_FRACTION = 0.1


class LexiconFile(BaseModel):
    """On-disk shape of ``lexicon.json``."""

    version: int = 1
    weights: dict[str, float] = Field(default_factory=dict)


@dataclass(frozen=True)
class Lexicon:
    """Read-only token → signed weight table."""

    weights: Mapping[str, float]
    version: int = 1

    def __post_init__(self) -> None:
        normalized = {token.casefold(): float(weight) for token, weight in dict(self.weights).items()}
        object.__setattr__(self, "weights", MappingProxyType(normalized))

    def __contains__(self, token: object) -> bool:
        return token in self.weights

    def __len__(self) -> int:
        return len(self.weights)

    def weight(self, token: str) -> float:
        return self.weights.get(token, 0.0)


@lru_cache(maxsize=1)
def load_default_lexicon() -> Lexicon:
    """Load the packaged lexicon once per process."""

    raw = resources.files("pulseboard.sentiment").joinpath("lexicon.json").read_text(encoding="utf-8")
    parsed = LexiconFile.model_validate(json.loads(raw))
    return Lexicon(weights=parsed.weights, version=parsed.version)


def tokenize(text: str) -> list[str]:
    """Case-fold, drop punctuation and keep hyphens only inside words."""

    cleaned = _NON_TOKEN_CHARS.sub(" ", text.casefold())
    tokens = (token.strip("-") for token in cleaned.split())
    return [token for token in tokens if token]


def _clamp(value: float, low: float = -1.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class SentimentScorer:
    """Scores texts against an injected lexicon.

    A text's score is its summed lexicon weight divided by
    ``max(5, log2(8 + token_count))`` and clamped to [-1, 1], so a long post
    cannot dominate through length alone and a single strong hit lands well
    inside the range. Texts without lexicon hits score exactly 0.
    """

    def __init__(self, lexicon: Lexicon | None = None, *, trim_fraction: float = _DEFAULT_TRIM_FRACTION) -> None:
        if not 0 <= trim_fraction < 0.5:
            raise ValueError("trim_fraction must be in [0, 0.5)")
        self._lexicon = lexicon or load_default_lexicon()
        self._trim_fraction = trim_fraction

    @property
    def lexicon(self) -> Lexicon:
        return self._lexicon

    def score_text(self, text: str) -> float:
        tokens = tokenize(text or "")
        hits = [self._lexicon.weight(token) for token in tokens if token in self._lexicon]
        if not hits:
            return 0.0
        damping = max(_MIN_DAMPING, math.log2(8 + len(tokens)))
        return _clamp(sum(hits) / damping)

    def sample(self, text: str) -> SentimentSample:
        return SentimentSample(text=text, score=self.score_text(text))

    def aggregate(self, texts: Iterable[str]) -> float:
        """Trimmed mean of per-text scores, rounded to 2 decimals."""

        scores = sorted(self.score_text(text) for text in texts)
        if not scores:
            return 0.0
        cut = int(len(scores) * self._trim_fraction)
        kept = scores[cut : len(scores) - cut]
        mean = sum(kept) / len(kept)
        return _clamp(round(mean, 2))


@lru_cache(maxsize=1)
def get_default_scorer() -> SentimentScorer:
    return SentimentScorer(load_default_lexicon())


def score_text(text: str) -> float:
    return get_default_scorer().score_text(text)


def aggregate(texts: Iterable[str]) -> float:
    return get_default_scorer().aggregate(texts)


def score_sentiment(texts: Iterable[str]) -> float:
    """Aggregate sentiment of ``texts`` in [-1, 1]; 0 for no texts."""

    return aggregate(texts)


__all__ = [
    "Lexicon",
    "SentimentScorer",
    "aggregate",
    "get_default_scorer",
    "load_default_lexicon",
    "score_sentiment",
    "score_text",
    "tokenize",
]
