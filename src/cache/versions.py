"""Generation tracking and reclamation of stale partitions.

Each build owns exactly one static and one dynamic partition, both
tagged with the build's generation. On activation every other
partition, whatever its origin, is deleted.
"""

from typing import Dict, List, Set

import structlog

from src.cache.keys import CacheRole, PartitionName
from src.cache.manager import CacheManager

logger = structlog.get_logger(__name__)


class CacheVersionManager:
    """
    Track the current partition names and reclaim all others.

    Attributes:
        generation: Generation tag of the running build
        prefix: Partition name prefix
        cache: Cache manager the partitions live in

    Example:
        >>> versions = CacheVersionManager(cache, generation=2, prefix="anki-dashboard")
        >>> str(versions.current(CacheRole.STATIC))
        'anki-dashboard-static-v2'
        >>> await versions.reclaim()
        ['anki-dashboard-static-v1', 'anki-dashboard-dynamic-v1']
    """

    def __init__(self, cache: CacheManager, generation: int, prefix: str = "") -> None:
        if generation < 1:
            raise ValueError(f"Generation must be >= 1, got {generation}")
        self.cache = cache
        self.generation = generation
        self.prefix = prefix

    def current(self, role: CacheRole) -> PartitionName:
        """Partition name the current build uses for a role."""
        return PartitionName(role=role, generation=self.generation, prefix=self.prefix)

    @property
    def static(self) -> PartitionName:
        return self.current(CacheRole.STATIC)

    @property
    def dynamic(self) -> PartitionName:
        return self.current(CacheRole.DYNAMIC)

    def recognized(self) -> Set[str]:
        """Encoded names of every partition the current build intends to use."""
        return {str(self.current(role)) for role in CacheRole}

    async def reclaim(self) -> List[str]:
        """
        Delete every partition not in the recognized set.

        Partitions from other builds or other naming schemes are
        deleted unconditionally.

        Returns:
            Sorted names of the partitions that were deleted
        """
        recognized = self.recognized()
        stale = sorted(
            name for name in await self.cache.list_partitions() if name not in recognized
        )

        reclaimed = []
        for name in stale:
            fields = {"partition": name, "generation": self.generation}
            try:
                parsed = PartitionName.parse(name)
                fields.update(role=parsed.role.value, stale_generation=parsed.generation)
            except ValueError:
                fields["foreign"] = True

            logger.info("partition_reclaimed", **fields)
            if await self.cache.delete(name):
                reclaimed.append(name)

        logger.info(
            "partition_reclaim_complete",
            generation=self.generation,
            reclaimed=len(reclaimed),
            kept=sorted(recognized),
        )
        return reclaimed

    def describe(self) -> Dict[str, str]:
        return {role.value: str(self.current(role)) for role in CacheRole}
