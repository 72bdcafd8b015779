"""
MongoDB access for the shop.

One client per process; pymongo keeps its own connection pool, so the
``db`` handle is shared by every request. Collections: users, products, orders.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from logger import get_logger
from settings import settings

logger = get_logger(__name__)

USERS = "users"
PRODUCTS = "products"
ORDERS = "orders"

NEWEST_FIRST = [("createdAt", DESCENDING), ("_id", DESCENDING)]

# MongoClient does not connect until the first operation.
client = MongoClient(settings.DATABASE_URL)
db: Database = client[settings.DATABASE_NAME]


def get_db() -> Database:
    return db


def now() -> datetime:
    return datetime.now(timezone.utc)


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def ensure_indexes(database: Database) -> None:
    database[USERS].create_index([("email", ASCENDING)], unique=True)
    database[ORDERS].create_index([("customerEmail", ASCENDING)])


def create_document(database: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_none=True)
    doc = dict(data)
    doc.setdefault("createdAt", now())
    result = database[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
) -> List[dict]:
    return list(database[collection_name].find(filter_dict or {}).sort(NEWEST_FIRST))


def serialize_doc(doc: dict) -> dict:
    d = {**doc}
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    for k, v in list(d.items()):
        if isinstance(v, ObjectId):
            d[k] = str(v)
    return d
