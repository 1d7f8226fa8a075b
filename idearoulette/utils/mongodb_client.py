from datetime import datetime, timezone
from functools import wraps
from typing import Any, Dict, List, Optional

from pymongo import MongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from idearoulette.errors import StoreError
from idearoulette.utils.config import config
from idearoulette.utils.constants import (
    USERS_COLLECTION,
    IDEAS_COLLECTION,
    INTERACTIONS_COLLECTION,
    SESSIONS_COLLECTION,
    BEHAVIOR_COLLECTION,
)
from idearoulette.utils.logger import logger


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def store_operation(func):
    """Translate driver errors into StoreError so callers handle one type."""
    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except PyMongoError as e:
            logger.error(f"MongoDB error in {func.__name__}: {e}")
            raise StoreError(str(e)) from e
    return wrapper


class MongoDBClient:
    """
    Durable document store.

    Per-user documents live in `users`, keyed by the identity provider's uid.
    The feed relies on five primitives over them: read the whole document,
    set fields, add unique array members, pull array members and increment
    numeric fields.
    """

    def __init__(self, client: Optional[MongoClient] = None, db_name: Optional[str] = None):
        self.client = client or MongoClient(config.mongo_uri)

        self.db = self.client[db_name or config.mongo_db_name]
        self.users = self.db[USERS_COLLECTION]
        self.ideas = self.db[IDEAS_COLLECTION]
        self.interactions = self.db[INTERACTIONS_COLLECTION]
        self.sessions = self.db[SESSIONS_COLLECTION]
        self.behavior = self.db[BEHAVIOR_COLLECTION]
        self.create_indexes()

    def create_indexes(self):
        """Create necessary indexes for collections."""
        self.interactions.create_index([("userId", 1), ("timestamp", -1)])
        self.interactions.create_index("sessionId")
        self.sessions.create_index("userId")
        self.ideas.create_index("userId")
        self.ideas.create_index("name")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # User documents

    @store_operation
    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Read the whole user document."""
        return self.users.find_one({"_id": user_id})

    @store_operation
    def ensure_user(self, user_id: str, initial_data: Dict[str, Any]) -> bool:
        """Create the user document if missing. Returns True when it was created."""
        result = self.users.update_one(
            {"_id": user_id},
            {"$setOnInsert": initial_data},
            upsert=True
        )
        created = result.upserted_id is not None
        if created:
            logger.info(f"Created user document for {user_id}")
        return created

    @store_operation
    def set_user_fields(self, user_id: str, fields: Dict[str, Any]):
        """Update one or more fields on the user document."""
        self.users.update_one(
            {"_id": user_id},
            {"$set": {**fields, "lastActiveAt": utcnow()}}
        )

    @store_operation
    def add_to_user_set(self, user_id: str, values_by_field: Dict[str, List[Any]]):
        """Append values to array fields, skipping members already present."""
        additions = {
            field: {"$each": values}
            for field, values in values_by_field.items()
            if values
        }
        if not additions:
            return
        self.users.update_one(
            {"_id": user_id},
            {"$addToSet": additions, "$set": {"lastActiveAt": utcnow()}}
        )

    @store_operation
    def pull_from_user_array(self, user_id: str, field: str, value: Any):
        """Remove every occurrence of value from an array field."""
        self.users.update_one(
            {"_id": user_id},
            {"$pull": {field: value}, "$set": {"lastActiveAt": utcnow()}}
        )

    @store_operation
    def push_unique_capped(self, user_id: str, field: str, value: Any, limit: int) -> bool:
        """
        Append value to an array field unless present, keeping only the last `limit` members.

        Returns:
            True if value was appended
        """
        result = self.users.update_one(
            {"_id": user_id, field: {"$ne": value}},
            {
                "$push": {field: {"$each": [value], "$slice": -limit}},
                "$set": {"lastActiveAt": utcnow()}
            }
        )
        return result.modified_count == 1

    @store_operation
    def set_user_flag_once(self, user_id: str, field: str) -> bool:
        """Flip a boolean field to True. Returns True only for the call that flipped it."""
        result = self.users.update_one(
            {"_id": user_id, field: {"$ne": True}},
            {"$set": {field: True, "lastActiveAt": utcnow()}}
        )
        return result.modified_count == 1

    @store_operation
    def increment_user_field(self, user_id: str, field: str, amount: int = 1) -> int:
        """Atomically increment a numeric field and return its new value."""
        updated = self.users.find_one_and_update(
            {"_id": user_id},
            {"$inc": {field: amount}, "$set": {"lastActiveAt": utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        if not updated:
            raise StoreError(f"User document {user_id} not found")
        return updated.get(field, 0)

    # Generated ideas

    @store_operation
    def insert_generated_ideas(self, documents: List[Dict[str, Any]]) -> int:
        if not documents:
            return 0
        result = self.ideas.insert_many(documents, ordered=False)
        logger.info(f"Stored {len(result.inserted_ids)} generated ideas")
        return len(result.inserted_ids)

    # Analytics

    @store_operation
    def insert_interaction(self, document: Dict[str, Any]):
        self.interactions.insert_one(document)

    @store_operation
    def insert_session(self, session_id: str, document: Dict[str, Any]):
        self.sessions.insert_one({"_id": session_id, **document})

    @store_operation
    def get_session(self, session_id: str) -> Optional[Dict[str, Any]]:
        return self.sessions.find_one({"_id": session_id})

    @store_operation
    def update_session(self, session_id: str, fields: Dict[str, Any]):
        self.sessions.update_one({"_id": session_id}, {"$set": fields})

    @store_operation
    def update_user_behavior(self, user_id: str, increments: Dict[str, int]):
        """Bump rolling per-user counters, creating the behavior document on first use."""
        now = utcnow()
        self.behavior.update_one(
            {"_id": user_id},
            {
                "$inc": increments,
                "$set": {"lastActiveDate": now},
                "$setOnInsert": {"firstSessionDate": now},
            },
            upsert=True
        )

    @store_operation
    def get_user_behavior(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.behavior.find_one({"_id": user_id})

    def close(self):
        """Close the MongoDB connection."""
        if self.client:
            self.client.close()
