"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ProviderName = Literal["finnhub", "alpha_vantage"]

DEFAULT_WATCHLIST = ["AAPL", "MSFT", "NVDA", "VOLV-B.ST", "ERIC-B.ST"]
DEFAULT_OVERLAY_CANDIDATES = ["^OMXS30", "OMXS30", "OMXS30.ST", "XACT-OMXS30.ST"]


class AppSettings(BaseSettings):
    """Configuration options for the Pulseboard service."""

    app_name: str = Field(default="Pulseboard")

    alphavantage_api_key: str | None = Field(default=None, description="Alpha Vantage API key")
    alphavantage_requests_per_minute: int = Field(default=5, ge=1)
    finnhub_api_key: str | None = Field(default=None, description="Finnhub API key")
    reddit_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; PulseboardBot/1.0; +https://example.com)",
    )
    http_timeout_seconds: float = Field(default=15.0, gt=0)

    primary_provider: ProviderName = Field(default="finnhub")
    secondary_provider: ProviderName = Field(default="alpha_vantage")
    preferred_exchange_suffix: str = Field(
        default=".ST",
        description="Exchange suffix used to restrict fallback symbol searches.",
    )

    benchmark_symbol: str = Field(default="SPY")
    benchmark_label: str = Field(default="spy")
    overlay_candidates: list[str] = Field(default_factory=lambda: list(DEFAULT_OVERLAY_CANDIDATES))
    overlay_label: str = Field(default="omx")
    default_watchlist: list[str] = Field(default_factory=lambda: list(DEFAULT_WATCHLIST))

    watchlist_lookback_days: int = Field(default=420, ge=1)
    watchlist_min_points: int = Field(
        default=15,
        ge=1,
        description="Shortest history that still yields a live row; longer windows report unavailable.",
    )
    detail_lookback_days: int = Field(default=7300, ge=1)
    detail_min_points: int = Field(default=20, ge=1)

    sentiment_window_days: int = Field(default=30, ge=1)
    news_text_cap: int = Field(default=80, ge=1)
    symbol_search_limit: int = Field(default=12, ge=1)

    quote_cache_ttl_seconds: int = Field(default=300, ge=0)
    series_cache_ttl_seconds: int = Field(default=300, ge=0)
    deep_series_cache_ttl_seconds: int = Field(default=86400, ge=0)
    deep_series_threshold_days: int = Field(
        default=500,
        description="Series requests above this many days use the deep-history TTL.",
    )
    search_cache_ttl_seconds: int = Field(default=3600, ge=0)
    news_cache_ttl_seconds: int = Field(default=1800, ge=0)
    social_cache_ttl_seconds: int = Field(default=3600, ge=0)
    cache_max_entries: int = Field(default=4096, ge=1)

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="pulseboard")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"alphavantage_api_key", "finnhub_api_key"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_WATCHLIST",
    "DEFAULT_OVERLAY_CANDIDATES",
    "ProviderName",
    "get_settings",
]
