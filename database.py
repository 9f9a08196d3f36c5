from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Type

from fastapi import Request
from pymongo import DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from errors import PersistenceError
from logger import get_logger
from models import Application, R, build_record

logger = get_logger(__name__)

DEFAULT_DATABASE = "test"


class RecordStore(ABC):
    """
    Persistence of Contact and Application records.

    Subclasses supply raw document access; validation and the mapping
    between records and documents live here.
    """

    @abstractmethod
    def insert(self, collection: str, document: Dict[str, Any]) -> Any:
        """Insert a document and return its id."""

    @abstractmethod
    def find_newest_first(self, collection: str) -> List[Dict[str, Any]]:
        """Return every document of a collection ordered by createdAt, newest first."""

    def save(self, record_type: Type[R], fields: Mapping[str, Any]) -> R:
        record = build_record(record_type, fields)
        inserted_id = self.insert(record.collection, record.to_document())
        return record.model_copy(update={"id": str(inserted_id)})

    def list_applications(self) -> List[Application]:
        documents = self.find_newest_first(Application.collection)
        return [Application.model_validate(document) for document in documents]

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass


class MongoRecordStore(RecordStore):
    def __init__(self, client: MongoClient, database: Optional[Database] = None):
        self.client = client
        self.db = database if database is not None else client.get_default_database(default=DEFAULT_DATABASE)

    @classmethod
    def connect(cls, uri: str) -> "MongoRecordStore":
        client: MongoClient = MongoClient(uri, server_api=ServerApi("1"), tz_aware=True)
        return cls(client)

    def open(self) -> None:
        try:
            self.client.admin.command("ping")
        except PyMongoError as exc:
            logger.error("MongoDB Connection Error: %s", exc)
            raise PersistenceError("MongoDB is unreachable") from exc
        logger.info("MongoDB Connected (database %s)", self.db.name)

    def close(self) -> None:
        self.client.close()

    def insert(self, collection: str, document: Dict[str, Any]) -> Any:
        try:
            result = self.db[collection].insert_one(document)
        except PyMongoError as exc:
            logger.exception("Insert into %s failed", collection)
            raise PersistenceError(f"insert into {collection} failed") from exc
        return result.inserted_id

    def find_newest_first(self, collection: str) -> List[Dict[str, Any]]:
        try:
            return list(self.db[collection].find().sort("createdAt", DESCENDING))
        except PyMongoError as exc:
            logger.exception("Reading %s failed", collection)
            raise PersistenceError(f"reading {collection} failed") from exc


def get_store(request: Request) -> RecordStore:
    return request.app.state.store
