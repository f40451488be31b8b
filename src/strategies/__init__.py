"""
Caching strategies for intercepted requests.

This package provides:
- StrategyClassifier: picks the strategy for a request
- NetworkFirstExecutor: fresh data first, cache and placeholder as fallback
- CacheFirstExecutor: cached copy first, refreshed in the background
"""

from src.strategies.base import ResponseSource, StrategyResult
from src.strategies.cache_first import CacheFirstExecutor
from src.strategies.classifier import Strategy, StrategyClassifier
from src.strategies.network_first import NetworkFirstExecutor

__all__ = [
    "Strategy",
    "StrategyClassifier",
    "ResponseSource",
    "StrategyResult",
    "NetworkFirstExecutor",
    "CacheFirstExecutor",
]
