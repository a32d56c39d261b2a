"""In-process property store. Contents are lost on close."""

from fintrack.models.property import RealEstateProperty, RepriceSnapshot


class MemoryRepo:
    def __init__(self) -> None:
        self._properties: dict[str, RealEstateProperty] = {}
        self._snapshots: dict[str, RepriceSnapshot] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        self._properties.clear()
        self._snapshots.clear()

    async def save_property(self, prop: RealEstateProperty) -> None:
        self._properties[prop.id] = prop

    async def get_property(self, property_id: str) -> RealEstateProperty | None:
        return self._properties.get(property_id)

    async def list_properties(self) -> list[RealEstateProperty]:
        return list(self._properties.values())

    async def delete_property(self, property_id: str) -> None:
        self._properties.pop(property_id, None)
        self._snapshots.pop(property_id, None)

    async def save_snapshot(self, property_id: str, snapshot: RepriceSnapshot) -> None:
        self._snapshots[property_id] = snapshot

    async def get_snapshot(self, property_id: str) -> RepriceSnapshot | None:
        return self._snapshots.get(property_id)

    async def delete_snapshot(self, property_id: str) -> None:
        self._snapshots.pop(property_id, None)
