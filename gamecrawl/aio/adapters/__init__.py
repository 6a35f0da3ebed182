"""Fetchers for concrete game catalogues."""

from .steam import AppPageParser, SteamStoreFetcher, STORE_URL

__all__ = [
    'AppPageParser',
    'SteamStoreFetcher',
    'STORE_URL',
]
