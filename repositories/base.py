from __future__ import annotations

from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument


class BaseRepository:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    async def find_many(self, collection: str, query: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        cursor = self.db[collection].find(query or {})
        return [doc async for doc in cursor]

    async def find_one(self, collection: str, query: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.db[collection].find_one(query)

    async def insert_one(self, collection: str, doc: Dict[str, Any]) -> Any:
        result = await self.db[collection].insert_one(doc)
        return result.inserted_id

    async def delete_one(self, collection: str, query: Dict[str, Any]) -> int:
        result = await self.db[collection].delete_one(query)
        return result.deleted_count

    async def next_sequence(self, name: str, *, counters: str = "counters") -> int:
        # Atomic $inc so concurrent writers never share an id
        doc = await self.db[counters].find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["seq"])
