"""Partition names and cache key generation.

This module provides the structured (role, generation) partition name
and the CacheKeyGenerator that turns a request identity into a
deterministic storage key.
"""

import hashlib
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import structlog

logger = structlog.get_logger(__name__)

_PARTITION_RE = re.compile(r"^(?:(?P<prefix>.+)-)?(?P<role>static|dynamic)-v(?P<generation>\d+)$")


class CacheRole(str, Enum):
    """Logical role of a cache partition."""

    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class PartitionName:
    """
    Structured partition name.

    The wire encoding is ``{prefix}-{role}-v{generation}`` (or
    ``{role}-v{generation}`` without a prefix), e.g.
    ``anki-dashboard-static-v1``.

    Attributes:
        role: Partition role (static or dynamic)
        generation: Generation tag of the build that owns it
        prefix: Namespace prefix shared by all partitions of the app
    """

    role: CacheRole
    generation: int
    prefix: str = ""

    def __str__(self) -> str:
        base = f"{self.role.value}-v{self.generation}"
        return f"{self.prefix}-{base}" if self.prefix else base

    @classmethod
    def parse(cls, name: str) -> "PartitionName":
        """
        Parse a partition name back to its components.

        Args:
            name: Encoded partition name

        Returns:
            PartitionName with role, generation and prefix

        Raises:
            ValueError: If the name does not follow the naming convention

        Example:
            >>> PartitionName.parse("anki-dashboard-dynamic-v3").generation
            3
        """
        match = _PARTITION_RE.match(name)
        if not match:
            raise ValueError(
                f"Invalid partition name: {name}. "
                f"Expected '[prefix-]{{static|dynamic}}-v{{generation}}'"
            )

        return cls(
            role=CacheRole(match.group("role")),
            generation=int(match.group("generation")),
            prefix=match.group("prefix") or "",
        )


class CacheKeyGenerator:
    """
    Generate consistent storage keys for request identities.

    Keys follow the pattern: req:{method}:{url_hash}

    The url_hash is the MD5 of the JSON-encoded identity, so the same
    request always maps to the same key regardless of URL length.
    """

    PREFIX = "req"

    @staticmethod
    def generate(identity: Tuple[str, str]) -> str:
        """
        Generate the storage key for a request identity.

        Args:
            identity: (method, absolute URL) pair

        Returns:
            Key string in format: req:{method}:{hash}

        Example:
            >>> CacheKeyGenerator.generate(("GET", "https://example.com/app.js"))
            'req:GET:...'
        """
        method, url = identity
        identity_str = json.dumps([method.upper(), url])
        url_hash = hashlib.md5(identity_str.encode()).hexdigest()

        cache_key = f"{CacheKeyGenerator.PREFIX}:{method.upper()}:{url_hash}"

        logger.debug("cache_key_generated", method=method, url=url, cache_key=cache_key)

        return cache_key


# Convenience singleton instance
key_generator = CacheKeyGenerator()
