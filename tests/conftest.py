"""
Shared fixtures.

MongoDB and GridFS are replaced by small in-memory fakes that implement the
subset of the pymongo API the services use. Failure injection is done by
listing method names in ``fail_on``.
"""

from datetime import datetime
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from gridfs.errors import NoFile
from pymongo.errors import DuplicateKeyError, PyMongoError

from carepulse.core.config import Settings, get_settings
from carepulse.db.client import get_db, get_storage
from carepulse.db.storage import ObjectStorage
from carepulse.main import create_app


def _matches(doc, query):
    for key, expected in query.items():
        value = doc.get(key)
        if isinstance(expected, dict) and "$in" in expected:
            if value not in expected["$in"]:
                return False
        elif value != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def sort(self, key, direction=1):
        self.docs = sorted(self.docs, key=lambda d: d.get(key) or datetime.min, reverse=direction == -1)
        return self

    def __iter__(self):
        return iter([dict(d) for d in self.docs])


class FakeCollection:
    def __init__(self, fail_on=(), unique=()):
        self.docs = []
        self.fail_on = set(fail_on)
        self.unique = tuple(unique)
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise PyMongoError(f"{name} failed")

    def insert_one(self, doc):
        self._call("insert_one")
        for key in self.unique:
            if any(d.get(key) == doc.get(key) for d in self.docs):
                raise DuplicateKeyError(f"duplicate key on {key}", code=11000)
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return SimpleNamespace(inserted_id=doc["_id"])

    def find(self, query=None):
        self._call("find")
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    def find_one(self, query=None):
        self._call("find_one")
        for doc in self.docs:
            if _matches(doc, query or {}):
                return dict(doc)
        return None

    def find_one_and_update(self, query, update, return_document=None):
        self._call("find_one_and_update")
        for doc in self.docs:
            if _matches(doc, query):
                doc.update(update["$set"])
                return dict(doc)
        return None

    def delete_one(self, query):
        self._call("delete_one")
        for doc in self.docs:
            if _matches(doc, query):
                self.docs.remove(doc)
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


class FakeBucket:
    def __init__(self, fail_on=()):
        self.files = {}
        self.fail_on = set(fail_on)

    def _call(self, name):
        if name in self.fail_on:
            raise PyMongoError(f"{name} failed")

    def upload_from_stream(self, filename, source, metadata=None):
        self._call("upload_from_stream")
        file_id = ObjectId()
        self.files[file_id] = SimpleNamespace(data=bytes(source), filename=filename, metadata=metadata)
        return file_id

    def delete(self, file_id):
        self._call("delete")
        if file_id not in self.files:
            raise NoFile(f"no file {file_id}")
        del self.files[file_id]

    def open_download_stream(self, file_id):
        self._call("open_download_stream")
        if file_id not in self.files:
            raise NoFile(f"no file {file_id}")
        stored = self.files[file_id]
        return SimpleNamespace(read=lambda: stored.data, metadata=stored.metadata, filename=stored.filename)


@pytest.fixture
def settings():
    return Settings(
        mongo_uri="mongodb://localhost:27017",
        database_id="carepulse_test",
        doctor_collection_id="doctors",
        bucket_id="doctor-images",
        endpoint="https://cloud.example.com/v1",
        project_id="proj-123",
    )


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def storage(bucket, settings):
    return ObjectStorage(bucket, settings)


@pytest.fixture
def app(db, storage, settings):
    application = create_app(settings=settings, lifespan_handler=None)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_db] = lambda: db
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def doctors():
    return [
        {"id": str(ObjectId()), "name": "Dr. A", "speciality": "Cardiology"},
        {"id": str(ObjectId()), "name": "Dr. B", "speciality": "Neurology"},
    ]


@pytest.fixture
def appointment_payload():
    return {
        "primaryPhysician": "Dr. A",
        "schedule": "2024-06-01T14:30:00",
        "reason": "Annual check-up",
        "note": "Prefer afternoon",
        "paymentMethod": "cash",
        "paymentAmount": 500,
    }


@pytest.fixture
def failing_collection():
    """Factory for a collection whose listed methods raise PyMongoError"""
    def make(*methods):
        return FakeCollection(fail_on=methods)
    return make


@pytest.fixture
def unique_collection():
    """Factory for a collection enforcing a unique index on the given keys"""
    def make(*keys):
        return FakeCollection(unique=keys)
    return make
