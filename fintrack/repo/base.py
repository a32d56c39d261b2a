"""Protocol definition for property storage.

Implementations: MemoryRepo (in-process), FileRepo (JSON document),
SqlRepo (SQLAlchemy). All are interchangeable behind PropertyRepo.
"""

from typing import Protocol, runtime_checkable

from fintrack.models.property import RealEstateProperty, RepriceSnapshot


@runtime_checkable
class PropertyRepo(Protocol):
    async def initialize(self) -> None:
        """Prepare the backing store (load file, create tables)."""
        ...

    async def close(self) -> None:
        ...

    async def save_property(self, prop: RealEstateProperty) -> None:
        """Insert or replace a property by id."""
        ...

    async def get_property(self, property_id: str) -> RealEstateProperty | None:
        ...

    async def list_properties(self) -> list[RealEstateProperty]:
        ...

    async def delete_property(self, property_id: str) -> None:
        """Remove a property and its snapshot. Missing ids are ignored."""
        ...

    async def save_snapshot(self, property_id: str, snapshot: RepriceSnapshot) -> None:
        ...

    async def get_snapshot(self, property_id: str) -> RepriceSnapshot | None:
        ...

    async def delete_snapshot(self, property_id: str) -> None:
        ...
