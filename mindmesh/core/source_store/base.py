"""
Read interface over the application's item collections.

The assistant never writes source records; it only lists them per
tenant+user scope and resolves their tags in one batched lookup per type.
"""

from abc import ABC, abstractmethod

from mindmesh.models.source import SourceRecord, SourceType


class SourceStore(ABC):
    """Abstract base class for source record readers."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the connection (and schema, where the store owns one)."""
        pass

    @abstractmethod
    async def list_records(
        self, tenant_id: str, user_id: str, source_type: SourceType
    ) -> list[SourceRecord]:
        """
        List every record of one type owned by a tenant+user pair.

        Raises:
            SourceStoreError: If the read fails
        """
        pass

    @abstractmethod
    async def tags_for_items(
        self, source_type: SourceType, item_ids: list[str]
    ) -> dict[str, list[str]]:
        """
        Resolve tag names for many items of one type in a single lookup.

        Args:
            source_type: Item type the IDs belong to
            item_ids: Item IDs

        Returns:
            Mapping of item ID to tag names in a stable order. Items without
            tags may be absent.

        Raises:
            SourceStoreError: If the read fails
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
