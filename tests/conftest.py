"""
Shared fixtures: an in-memory RecordStore and a TestClient built around it
with a throwaway upload directory.
"""

import io
from typing import Any, Dict, List

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from config import Settings
from database import RecordStore
from errors import PersistenceError
from main import create_app


class InMemoryRecordStore(RecordStore):
    def __init__(self) -> None:
        self.collections: Dict[str, List[Dict[str, Any]]] = {}
        self.fail_with: Exception = None
        self.opened = False
        self.closed = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def insert(self, collection: str, document: Dict[str, Any]) -> Any:
        if self.fail_with is not None:
            raise self.fail_with
        stored = dict(document, _id=ObjectId())
        self.collections.setdefault(collection, []).append(stored)
        return stored["_id"]

    def find_newest_first(self, collection: str) -> List[Dict[str, Any]]:
        if self.fail_with is not None:
            raise self.fail_with
        documents = list(reversed(self.collections.get(collection, [])))
        return sorted(documents, key=lambda document: document["createdAt"], reverse=True)

    def documents(self, collection: str) -> List[Dict[str, Any]]:
        return self.collections.get(collection, [])


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def settings(upload_dir) -> Settings:
    return Settings(mongodb_uri="", frontend_url="http://localhost:5173", upload_dir=upload_dir)


@pytest.fixture
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def broken_store(store) -> InMemoryRecordStore:
    store.fail_with = PersistenceError("connection refused")
    return store


@pytest.fixture
def pdf_bytes() -> bytes:
    return b"%PDF-1.4\n" + b"0" * 1024 + b"\n%%EOF"


@pytest.fixture
def resume_file(pdf_bytes) -> tuple:
    return ("resume", ("jane-cv.pdf", io.BytesIO(pdf_bytes), "application/pdf"))


@pytest.fixture
def application_form() -> dict:
    return {
        "name": "Jane",
        "email": "jane@x.com",
        "qualification": "BSc",
        "specialization": "Bio",
    }
