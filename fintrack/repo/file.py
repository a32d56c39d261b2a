"""JSON-file-backed property store.

The whole store is one JSON document, loaded on initialize() and rewritten
after every mutation.
"""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from fintrack.models.property import RealEstateProperty, RepriceSnapshot

logger = logging.getLogger(__name__)


class FileRepo:
    def __init__(self, path: str = "data/store.json"):
        self.path = Path(path)
        self._properties: dict[str, RealEstateProperty] = {}
        self._snapshots: dict[str, RepriceSnapshot] = {}

    async def initialize(self) -> None:
        self._properties, self._snapshots = self._load()

    async def close(self) -> None:
        pass

    def _load(self) -> tuple[dict[str, RealEstateProperty], dict[str, RepriceSnapshot]]:
        if not self.path.exists():
            return {}, {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            properties = [RealEstateProperty.model_validate(p) for p in raw.get("properties", [])]
            snapshots = {
                pid: RepriceSnapshot.model_validate(s)
                for pid, s in raw.get("snapshots", {}).items()
            }
        except (OSError, ValueError, AttributeError, ValidationError):
            logger.warning("Unreadable store at %s, starting empty", self.path, exc_info=True)
            return {}, {}

        logger.debug("Loaded %d properties from %s", len(properties), self.path)
        return {p.id: p for p in properties}, snapshots

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        doc = {
            "properties": [p.model_dump(mode="json") for p in self._properties.values()],
            "snapshots": {
                pid: s.model_dump(mode="json") for pid, s in self._snapshots.items()
            },
        }
        self.path.write_text(json.dumps(doc, indent=2), encoding="utf-8")

    async def save_property(self, prop: RealEstateProperty) -> None:
        self._properties[prop.id] = prop
        self._save()

    async def get_property(self, property_id: str) -> RealEstateProperty | None:
        return self._properties.get(property_id)

    async def list_properties(self) -> list[RealEstateProperty]:
        return list(self._properties.values())

    async def delete_property(self, property_id: str) -> None:
        self._properties.pop(property_id, None)
        self._snapshots.pop(property_id, None)
        self._save()

    async def save_snapshot(self, property_id: str, snapshot: RepriceSnapshot) -> None:
        self._snapshots[property_id] = snapshot
        self._save()

    async def get_snapshot(self, property_id: str) -> RepriceSnapshot | None:
        return self._snapshots.get(property_id)

    async def delete_snapshot(self, property_id: str) -> None:
        self._snapshots.pop(property_id, None)
        self._save()
