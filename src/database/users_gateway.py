"""
Persistence gateway for the users collection
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Any failure reported by the document store"""


class DuplicateEmailError(StorageError):
    """The unique index on email rejected a write"""


def utc_now() -> datetime:
    """Current UTC time, naive and truncated to BSON millisecond precision"""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def name_filter(name: Optional[str]) -> Dict[str, Any]:
    """Match all, or a case-insensitive literal substring of name"""
    if not name:
        return {}
    return {"name": {"$regex": re.escape(name), "$options": "i"}}


class UsersGateway:
    """Thin accessor over the users collection. Owns the stored representation."""

    def __init__(self, collection, clock: Callable[[], datetime] = utc_now):
        self.collection = collection
        self.clock = clock

    async def ensure_indexes(self) -> None:
        try:
            await self.collection.create_index([("email", ASCENDING)], unique=True)
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    async def list(self, name: Optional[str], skip: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        """
        Fetch one page of users plus the total matching the filter

        Args:
            name: Optional substring to match against name
            skip: Number of leading matches to skip
            limit: Maximum number of users to return

        Returns:
            Tuple of (page items, total count ignoring pagination)
        """
        query = name_filter(name)
        try:
            cursor = self.collection.find(query).sort("_id", ASCENDING).skip(skip).limit(limit)
            items = await cursor.to_list(length=limit)
            total = await self.collection.count_documents(query)
        except PyMongoError as e:
            raise StorageError(str(e)) from e
        return items, total

    async def count(self, name: Optional[str] = None) -> int:
        try:
            return await self.collection.count_documents(name_filter(name))
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    async def get_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one({"_id": ObjectId(user_id)})
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    async def exists_by_email(self, email: str, exclude_id: Optional[str] = None) -> bool:
        """Check email uniqueness, optionally ignoring the record being updated"""
        query: Dict[str, Any] = {"email": email}
        if exclude_id is not None:
            query["_id"] = {"$ne": ObjectId(exclude_id)}
        try:
            return await self.collection.find_one(query, {"_id": 1}) is not None
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    async def insert(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new user; assigns _id, createdAt and updatedAt"""
        now = self.clock()
        document = {"_id": ObjectId(), **fields, "createdAt": now, "updatedAt": now}
        try:
            await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateEmailError(str(e)) from e
        except PyMongoError as e:
            raise StorageError(str(e)) from e
        return document

    async def update_by_id(self, user_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply a partial patch and refresh updatedAt

        Identity and createdAt are never part of the $set.

        Returns:
            The document after the update, or None when the id does not exist
        """
        changes = {key: value for key, value in patch.items() if key not in ("_id", "createdAt", "updatedAt")}
        changes["updatedAt"] = self.clock()
        try:
            return await self.collection.find_one_and_update(
                {"_id": ObjectId(user_id)},
                {"$set": changes},
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            raise DuplicateEmailError(str(e)) from e
        except PyMongoError as e:
            raise StorageError(str(e)) from e

    async def delete_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        try:
            return await self.collection.find_one_and_delete({"_id": ObjectId(user_id)})
        except PyMongoError as e:
            raise StorageError(str(e)) from e
