"""
Shared types for caching strategy executors.
"""
from dataclasses import dataclass
from enum import Enum

from src.models.responses import ResponseSnapshot


class ResponseSource(str, Enum):
    """Where the response handed to the requester came from."""

    NETWORK = "network"
    CACHE = "cache"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class StrategyResult:
    """
    Outcome of running a strategy for one request.

    Attributes:
        response: Response to return to the requester
        source: Origin of that response
    """

    response: ResponseSnapshot
    source: ResponseSource
