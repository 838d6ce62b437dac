"""
Integration test fixtures for a real MongoDB server.

Expect MONGODB_URI (and optionally MONGODB_DATABASE) to be set, e.g. by:
  INTEGRATION=1 MONGODB_URI=mongodb://localhost:27017 pytest tests/integration -v
A throwaway server can be started with:
  docker run --rm -p 27017:27017 mongo:7
"""

import os
import uuid
import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError


INTEGRATION_DATABASE_NAME = os.environ.get("MONGODB_DATABASE", "docstore_integration")
INTEGRATION_COLLECTION_NAME = "people"


def _mongo_reachable(uri):
    """Check if MongoDB answers a ping at the given URI."""
    client = MongoClient(uri, serverSelectionTimeoutMS=2000)
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
    finally:
        client.close()


def _require_integration_env():
    """Skip if integration env is not set (INTEGRATION=1 and MONGODB_URI)."""
    if os.environ.get("INTEGRATION") != "1":
        pytest.skip("Integration tests require INTEGRATION=1 and MONGODB_URI")
    if not os.environ.get("MONGODB_URI"):
        pytest.skip("Integration tests require MONGODB_URI")


@pytest.fixture(scope="module")
def store():
    """DocumentStoreClient against the real server; the database is dropped afterwards."""
    _require_integration_env()
    uri = os.environ["MONGODB_URI"]
    if not _mongo_reachable(uri):
        pytest.skip(f"MongoDB not reachable at {uri}")

    from docstore.services.document_store import DocumentStoreClient
    client = DocumentStoreClient(
        uri,
        INTEGRATION_DATABASE_NAME,
        connect=True,
        client_options={"serverSelectionTimeoutMS": 2000},
    )
    yield client
    client.delete_database()
    client.close()


@pytest.fixture(scope="module")
def repo(store):
    """MongoRepository for the people collection on the real server."""
    from docstore.repositories.mongo_repository import MongoRepository
    return MongoRepository(
        collection_name=INTEGRATION_COLLECTION_NAME,
        key_field="id",
        store_client=store,
    )


@pytest.fixture
def unique_key():
    """Generate a unique key for integration test documents to avoid collisions."""
    return f"it-{uuid.uuid4().hex[:12]}"
