"""
MongoDB access for the store API.

Every helper takes the Database explicitly (routes get it from Depends(get_db))
and wraps pymongo failures in StoreError so handlers never see a raw driver
exception. Documents are stamped with createdAt/updatedAt on insert; lists
come back newest-first.
"""
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from pydantic import BaseModel
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from config import get_settings
from errors import DuplicateError, StoreError, ValidationError

logger = logging.getLogger(__name__)

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]


@lru_cache
def get_client() -> MongoClient:
    settings = get_settings()
    return MongoClient(settings.database_url)


def get_db() -> Database:
    return get_client()[get_settings().database_name]


def ensure_indexes(db: Database):
    """Create the indexes the API relies on (idempotent)."""
    try:
        db["user"].create_index("email", unique=True)
    except PyMongoError as exc:
        raise StoreError("index", "user") from exc


# ----------------------- Utils -----------------------
def utcnow() -> datetime:
    # Mongo keeps millisecond precision; truncate so created == stored.
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def parse_object_id(value: str, label: str = "document") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {label} ID format", field="id")
    return ObjectId(value)


def serialize_doc(doc):
    if not doc:
        return doc
    doc = dict(doc)
    _id = doc.pop("_id", None)
    if _id is not None:
        doc["id"] = str(_id)
    for k, v in list(doc.items()):
        if isinstance(v, datetime):
            if v.tzinfo is None:
                v = v.replace(tzinfo=timezone.utc)
            doc[k] = v.isoformat()
        elif isinstance(v, ObjectId):
            doc[k] = str(v)
    return doc


# ----------------------- CRUD -----------------------
def create_document(db: Database, collection_name: str, data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        doc = data.model_dump()
    else:
        doc = dict(data)
    now = utcnow()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    try:
        result = db[collection_name].insert_one(doc)
    except DuplicateKeyError as exc:
        key_value = (exc.details or {}).get("keyValue") or {}
        field = next(iter(key_value), "value")
        raise DuplicateError(collection_name.capitalize(), field) from exc
    except PyMongoError as exc:
        raise StoreError("create", collection_name) from exc
    doc["_id"] = result.inserted_id
    logger.info(f"Created {collection_name}", extra={"collection": collection_name, "document_id": str(doc["_id"])})
    return doc


def get_documents(db: Database, collection_name: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[dict]:
    try:
        cursor = db[collection_name].find(filter_dict or {}).sort(NEWEST_FIRST)
        return list(cursor)
    except PyMongoError as exc:
        raise StoreError("fetch", collection_name) from exc


def find_document(db: Database, collection_name: str, filter_dict: Dict[str, Any]) -> Optional[dict]:
    try:
        return db[collection_name].find_one(filter_dict)
    except PyMongoError as exc:
        raise StoreError("fetch", collection_name) from exc


def get_document(db: Database, collection_name: str, oid: ObjectId) -> Optional[dict]:
    return find_document(db, collection_name, {"_id": oid})


def update_document(db: Database, collection_name: str, oid: ObjectId, fields: Dict[str, Any]) -> Optional[dict]:
    update = dict(fields)
    update["updatedAt"] = utcnow()
    try:
        doc = db[collection_name].find_one_and_update(
            {"_id": oid},
            {"$set": update},
            return_document=ReturnDocument.AFTER,
        )
    except PyMongoError as exc:
        raise StoreError("update", collection_name) from exc
    if doc is not None:
        logger.info(f"Updated {collection_name}", extra={"collection": collection_name, "document_id": str(oid)})
    return doc


def delete_document(db: Database, collection_name: str, oid: ObjectId) -> Optional[dict]:
    try:
        doc = db[collection_name].find_one_and_delete({"_id": oid})
    except PyMongoError as exc:
        raise StoreError("delete", collection_name) from exc
    if doc is not None:
        logger.info(f"Deleted {collection_name}", extra={"collection": collection_name, "document_id": str(oid)})
    return doc


def search_documents(db: Database, collection_name: str, fields: List[str], pattern: str) -> List[dict]:
    """Case-insensitive regex match of ``pattern`` against any of ``fields``."""
    query = {"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in fields]}
    return get_documents(db, collection_name, query)
