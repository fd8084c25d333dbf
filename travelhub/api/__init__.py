"""Pricing HTTP API."""

from .routes import router, get_pricing_settings

__all__ = [
    "router",
    "get_pricing_settings",
]
