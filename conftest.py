"""
Root conftest.py for the docstore test suite.

Provides an in-memory MongoDB stand-in, fixtures for the Flask app,
test client, JWT tokens, and factory resets.
"""

import copy
import os
import re
import time
import pytest
import jwt

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError
from pymongo.results import InsertOneResult, InsertManyResult, UpdateResult, DeleteResult

# Test keys: HS256 requires at least 32 bytes (RFC 7518) to avoid PyJWT warnings
TEST_SECRET_KEY = 'test-secret-key-for-flask-min-32-bytes-long!'
TEST_JWT_SECRET_KEY = 'test-jwt-secret-key-for-hs256-min-32-bytes!'

os.environ['SECRET_KEY'] = os.environ.get('SECRET_KEY', TEST_SECRET_KEY)
os.environ['JWT_SECRET_KEY'] = os.environ.get('JWT_SECRET_KEY', TEST_JWT_SECRET_KEY)


from docstore.config import DevelopmentConfig
from docstore.repositories.repository_factory import RepositoryFactory
from docstore.services.document_store_factory import DocumentStoreFactory


def _reset_all_factories():
    """Reset all singleton factories to clean state."""
    RepositoryFactory._instances = {}
    RepositoryFactory._backend = None
    RepositoryFactory._store_client = None
    RepositoryFactory._key_field = "id"
    DocumentStoreFactory._instance = None
    DocumentStoreFactory._configured = False


_MISSING = object()


def _sort_value(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value))


def _matches_condition(actual, condition):
    """Evaluate one field condition of a filter."""
    if isinstance(condition, dict) and condition and all(str(k).startswith("$") for k in condition):
        for operator, expected in condition.items():
            if operator == "$eq" and actual != expected:
                return False
            if operator == "$ne" and actual == expected:
                return False
            if operator == "$in" and actual not in expected:
                return False
            if operator == "$nin" and actual in expected:
                return False
            if operator == "$exists" and (actual is not _MISSING) != bool(expected):
                return False
            if operator in ("$gt", "$gte", "$lt", "$lte"):
                if actual is _MISSING or actual is None:
                    return False
                try:
                    if operator == "$gt" and not actual > expected:
                        return False
                    if operator == "$gte" and not actual >= expected:
                        return False
                    if operator == "$lt" and not actual < expected:
                        return False
                    if operator == "$lte" and not actual <= expected:
                        return False
                except TypeError:
                    return False
            if operator == "$regex":
                flags = re.IGNORECASE if "i" in condition.get("$options", "") else 0
                if not isinstance(actual, str) or not re.search(expected, actual, flags):
                    return False
        return True
    if actual is _MISSING:
        return condition is None
    return actual == condition


def _matches(document, query):
    """Simple filter evaluator for testing."""
    for field, condition in (query or {}).items():
        if not _matches_condition(document.get(field, _MISSING), condition):
            return False
    return True


class MockCollection:
    """In-memory mock of a MongoDB collection for testing."""

    def __init__(self, name):
        self.name = name
        self.documents = []

    def _find(self, query):
        return [document for document in self.documents if _matches(document, query)]

    def insert_one(self, document):
        if "_id" not in document:
            document["_id"] = ObjectId()
        if any(existing["_id"] == document["_id"] for existing in self.documents):
            raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name}")
        self.documents.append(copy.deepcopy(document))
        return InsertOneResult(document["_id"], True)

    def insert_many(self, documents):
        inserted_ids = [self.insert_one(document).inserted_id for document in documents]
        return InsertManyResult(inserted_ids, True)

    def find_one(self, query=None):
        found = self._find(query)
        return copy.deepcopy(found[0]) if found else None

    def find(self, query=None, skip=0, limit=0, sort=None):
        found = self._find(query)
        for field, direction in reversed(sort or []):
            found.sort(key=lambda document: _sort_value(document.get(field)), reverse=direction < 0)
        found = found[skip:]
        if limit:
            found = found[:limit]
        return iter(copy.deepcopy(found))

    def _apply_set(self, document, update):
        changed = False
        for field, value in update.get("$set", {}).items():
            if document.get(field, _MISSING) != value:
                document[field] = copy.deepcopy(value)
                changed = True
        return changed

    def _update(self, query, update, upsert, many):
        found = self._find(query)
        if not many:
            found = found[:1]
        if not found and upsert:
            document = {k: v for k, v in (query or {}).items() if not isinstance(v, dict)}
            self._apply_set(document, update)
            result = self.insert_one(document)
            return UpdateResult({"n": 1, "nModified": 0, "upserted": result.inserted_id}, True)
        modified = sum(1 for document in found if self._apply_set(document, update))
        return UpdateResult({"n": len(found), "nModified": modified}, True)

    def update_one(self, query, update, upsert=False):
        return self._update(query, update, upsert, many=False)

    def update_many(self, query, update, upsert=False):
        return self._update(query, update, upsert, many=True)

    def _delete(self, query, many):
        found = self._find(query)
        if not many:
            found = found[:1]
        for document in found:
            self.documents.remove(document)
        return DeleteResult({"n": len(found)}, True)

    def delete_one(self, query):
        return self._delete(query, many=False)

    def delete_many(self, query):
        return self._delete(query, many=True)

    def count_documents(self, query, limit=0):
        count = len(self._find(query))
        return min(count, limit) if limit else count

    def aggregate(self, pipeline):
        documents = copy.deepcopy(self.documents)
        for stage in pipeline:
            if "$match" in stage:
                documents = [document for document in documents if _matches(document, stage["$match"])]
            elif "$limit" in stage:
                documents = documents[:stage["$limit"]]
            elif "$count" in stage:
                documents = [{stage["$count"]: len(documents)}]
        return iter(documents)


class MockDatabase:
    """In-memory mock of a MongoDB database."""

    def __init__(self, name):
        self.name = name
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = MockCollection(name)
        return self.collections[name]


class MockAdmin:

    def __init__(self, client):
        self._client = client

    def command(self, name):
        if self._client.unreachable:
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return {"ok": 1.0, "command": name}


class MockMongoClient:
    """Mock MongoClient holding MockDatabase instances."""

    def __init__(self):
        self.databases = {}
        self.closed = False
        self.unreachable = False
        self.admin = MockAdmin(self)

    def __getitem__(self, name):
        if name not in self.databases:
            self.databases[name] = MockDatabase(name)
        return self.databases[name]

    def drop_database(self, name):
        self.databases.pop(name, None)

    def close(self):
        self.closed = True


class TestingConfig(DevelopmentConfig):
    # pylint: disable=too-few-public-methods
    """Configuration used by the API tests"""

    TESTING = True
    SECRET_KEY = TEST_SECRET_KEY
    JWT_SECRET_KEY = TEST_JWT_SECRET_KEY
    MONGODB_URI = 'mongodb://localhost:27017'
    MONGODB_DATABASE = 'docstore_test'
    MONGODB_ID_FIELD = 'id'
    MONGODB_CONNECT_EAGERLY = False
    DOCSTORE_COLLECTIONS = []


@pytest.fixture
def reset_factories():
    """Reset all singleton factories before and after a test."""
    _reset_all_factories()
    yield
    _reset_all_factories()


@pytest.fixture
def mock_mongo_client():
    """Provide an in-memory MongoDB client."""
    return MockMongoClient()


@pytest.fixture
def mongo_client_calls(monkeypatch, mock_mongo_client):
    """Route pymongo.MongoClient construction to the in-memory client.

    Returns the list of (args, kwargs) the client was constructed with.
    """
    calls = []

    def _factory(*args, **kwargs):
        calls.append((args, kwargs))
        mock_mongo_client.closed = False
        return mock_mongo_client

    monkeypatch.setattr("docstore.services.document_store.MongoClient", _factory)
    return calls


@pytest.fixture
def store(mongo_client_calls):
    """A DocumentStoreClient backed by the in-memory client."""
    from docstore.services.document_store import DocumentStoreClient
    client = DocumentStoreClient("mongodb://localhost:27017", "docstore_test")
    yield client
    client.close()


@pytest.fixture
def app(mongo_client_calls):
    """Create a Flask application for testing backed by the in-memory client."""
    from docstore import create_app

    # Reset all factories to ensure clean state
    _reset_all_factories()

    flask_app = create_app(TestingConfig)

    yield flask_app

    # Cleanup after test
    DocumentStoreFactory.close()
    _reset_all_factories()


@pytest.fixture
def client(app):
    """Create a Flask test client."""
    return app.test_client()


@pytest.fixture
def jwt_token():
    """Generate a valid JWT token for authenticated requests."""
    payload = {
        'user_name': 'testuser',
        'roles': ['sec:globaladmin'],
        'exp': int(time.time()) + 3600,
        'iat': int(time.time()),
    }
    token = jwt.encode(payload, TEST_JWT_SECRET_KEY, algorithm='HS256')
    return token


@pytest.fixture
def auth_headers(jwt_token):
    """Provide authorization headers with a valid JWT."""
    return {
        'Authorization': f'Bearer {jwt_token}',
        'Content-Type': 'application/json'
    }


@pytest.fixture
def json_headers():
    """Provide JSON content-type headers without auth."""
    return {
        'Content-Type': 'application/json'
    }


@pytest.fixture
def sample_document():
    """Provide a sample document keyed by the 'id' field."""
    return {
        'id': 'doc-1',
        'name': 'Akshay',
        'status': 'active',
        'age': 30
    }
