"""Configuration package for the Pulseboard service."""

from .settings import AppSettings, get_settings

__all__ = ["AppSettings", "get_settings"]
