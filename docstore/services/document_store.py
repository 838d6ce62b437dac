"""
Document store client wrapping the MongoDB driver with identity field lookups
"""

import logging
import threading
from typing import Dict, Any, Optional, List

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import ConnectionFailure
from pymongo.results import (
    InsertOneResult, InsertManyResult, UpdateResult, DeleteResult
)

from docstore.helpers.validation import (
    DocumentId,
    validate_collection_name,
    validate_field_name,
    validate_document_id,
    validate_filter,
    validate_document,
    validate_documents,
    validate_update_data,
    validate_pipeline,
)


class DocumentStoreClient:
    """
    MongoDB client that finds, updates and deletes documents by an
    application-chosen identity field instead of "_id".

    It is important to index the identity field for optimum performance.

    The driver connection is opened on first use (or immediately with
    connect=True), shared by every operation and kept until close().
    Operations issued after close() reconnect on demand.

    Example:

        with DocumentStoreClient("mongodb://localhost:27017", "test") as store:
            store.add("people", {"id": "1", "name": "Akshay"})
            person = store.get("people", "1")
    """

    def __init__(self, connection_url: str, database_name: str, *, id_field: str = "id",
                 connect: bool = False, client_options: Optional[Dict[str, Any]] = None):
        if not isinstance(connection_url, str) or not connection_url.strip():
            raise ValueError("connection_url must be provided")
        if not isinstance(database_name, str) or not database_name.strip():
            raise ValueError("database_name must be provided")

        self.connection_url = connection_url
        self.database_name = database_name
        self.id_field = validate_field_name(id_field)
        self.client_options = dict(client_options or {})
        self.client = None
        self._connected = False
        self._connection_lock = threading.RLock()
        self._logger = logging.getLogger(f"{__name__}.{database_name}")

        if connect:
            self.connect()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return (f"{self.__class__.__name__}(database_name={self.database_name!r}, "
                f"id_field={self.id_field!r}, connected={self.is_connected})")

    # Connection lifecycle

    @property
    def is_connected(self) -> bool:
        """True while a driver connection is held"""
        with self._connection_lock:
            return self._connected

    def connect(self) -> MongoClient:
        """
        Establish the driver connection if there is none

        Returns:
            MongoClient: The shared driver client

        Raises:
            pymongo.errors.PyMongoError: If the driver rejects the configuration
        """
        with self._connection_lock:
            if self.client is not None and self._connected:
                return self.client

            self._logger.info("Connecting to MongoDB database '%s'...", self.database_name)
            try:
                self.client = MongoClient(self.connection_url, **self.client_options)
            except Exception as e:
                self._logger.error("Failed to connect to MongoDB database '%s': %s", self.database_name, str(e))
                self.client = None
                self._connected = False
                raise

            self._connected = True
            self._logger.info("Successfully connected to MongoDB database '%s'", self.database_name)
            return self.client

    def close(self):
        """Close the driver connection. Safe to call more than once."""
        with self._connection_lock:
            if self.client is None:
                self._connected = False
                return

            try:
                self.client.close()
                self._logger.info("Closed MongoDB connection for '%s'", self.database_name)
            finally:
                self.client = None
                self._connected = False

    def _ensure_connection(self) -> MongoClient:
        """Return the driver client, reconnecting when it was closed"""
        with self._connection_lock:
            if self.client is None or not self._connected:
                self._logger.debug("No open connection for '%s', connecting on demand", self.database_name)
                return self.connect()
            return self.client

    def ping(self) -> bool:
        """
        Round trip to the server

        An unreachable server drops the connection handle, so is_connected
        turns False and the next operation reconnects.

        Returns:
            bool: True when the server answered

        Raises:
            pymongo.errors.PyMongoError: If the server is unreachable
        """
        client = self._ensure_connection()
        try:
            client.admin.command("ping")
        except ConnectionFailure:
            self.close()
            raise
        return True

    def health_check(self) -> dict:
        """
        Health check results for the store

        Returns:
            dict: status, message and connection state
        """
        try:
            self.ping()
            return {
                'status': 'healthy',
                'message': f"MongoDB database '{self.database_name}' is reachable",
                'connected': self.is_connected
            }
        except Exception as e:
            self._logger.error("Connection health check failed for '%s': %s", self.database_name, str(e))
            return {
                'status': 'unhealthy',
                'message': f"MongoDB database '{self.database_name}' is not reachable: {str(e)}",
                'connected': self.is_connected
            }

    # Handles

    def raw_client(self) -> MongoClient:
        """Return the underlying driver client, connecting if needed"""
        return self._ensure_connection()

    def database(self) -> Database:
        """Return the driver database handle"""
        return self._ensure_connection()[self.database_name]

    def collection(self, collection_name: str) -> Collection:
        """Return the driver collection handle"""
        validate_collection_name(collection_name)
        return self.database()[collection_name]

    def _id_filter(self, doc_id: DocumentId) -> dict:
        return {self.id_field: validate_document_id(doc_id)}

    # Inserts

    def add(self, collection_name: str, document: dict) -> InsertOneResult:
        """Insert a single document"""
        validate_document(document)
        return self.collection(collection_name).insert_one(document)

    def add_many(self, collection_name: str, documents: List[dict]) -> InsertManyResult:
        """Insert several documents in one call"""
        documents = validate_documents(documents)
        return self.collection(collection_name).insert_many(documents)

    # Updates

    def update(self, collection_name: str, doc_id: DocumentId, data: dict) -> UpdateResult:
        """
        Set fields on the document whose identity field equals doc_id

        Args:
            collection_name: Collection holding the document
            doc_id: Value of the identity field
            data: Fields to $set

        Returns:
            UpdateResult: The driver result

        Raises:
            ValueError: If data tries to change the identity field
        """
        query = self._id_filter(doc_id)
        validate_update_data(data)

        data = dict(data)
        if self.id_field in data:
            if data[self.id_field] != doc_id:
                raise ValueError(f"Field '{self.id_field}' cannot be changed by an update")
            data.pop(self.id_field)
            validate_update_data(data)

        return self.collection(collection_name).update_one(query, {"$set": data})

    def update_custom(self, collection_name: str, query: dict, data: dict, **options) -> UpdateResult:
        """
        Set fields on the first document matching query

        Extra keyword arguments (upsert, array_filters, ...) go to the driver.
        """
        validate_filter(query)
        validate_update_data(data)
        return self.collection(collection_name).update_one(query, {"$set": data}, **options)

    def update_many(self, collection_name: str, query: dict, data: dict, **options) -> UpdateResult:
        """Set fields on every document matching query"""
        validate_filter(query)
        validate_update_data(data)
        return self.collection(collection_name).update_many(query, {"$set": data}, **options)

    # Deletes

    def delete(self, collection_name: str, doc_id: DocumentId) -> DeleteResult:
        """Delete the document whose identity field equals doc_id"""
        query = self._id_filter(doc_id)
        return self.collection(collection_name).delete_one(query)

    def delete_custom(self, collection_name: str, query: dict) -> DeleteResult:
        """Delete the first document matching a non-empty query"""
        validate_filter(query, allow_empty=False)
        return self.collection(collection_name).delete_one(query)

    def delete_many(self, collection_name: str, query: dict) -> DeleteResult:
        """Delete every document matching a non-empty query"""
        validate_filter(query, allow_empty=False)
        return self.collection(collection_name).delete_many(query)

    def delete_database(self):
        """Drop the whole database"""
        client = self._ensure_connection()
        client.drop_database(self.database_name)
        self._logger.info("Dropped MongoDB database '%s'", self.database_name)

    # Reads

    def get(self, collection_name: str, doc_id: DocumentId) -> Optional[dict]:
        """Find one document by its identity field, None if missing"""
        query = self._id_filter(doc_id)
        return self.collection(collection_name).find_one(query)

    def get_custom(self, collection_name: str, query: dict) -> Optional[dict]:
        """Find the first document matching query"""
        validate_filter(query)
        return self.collection(collection_name).find_one(query)

    def get_all(self, collection_name: str, doc_id: DocumentId) -> List[dict]:
        """Find all documents sharing an identity value"""
        query = self._id_filter(doc_id)
        return list(self.collection(collection_name).find(query))

    def get_all_custom(self, collection_name: str, query: Optional[dict] = None, **options) -> List[dict]:
        """
        Find all documents matching query

        Extra keyword arguments (skip, limit, sort, projection, ...) go to
        the driver's find().
        """
        query = {} if query is None else validate_filter(query)
        return list(self.collection(collection_name).find(query, **options))

    def exists(self, collection_name: str, doc_id: DocumentId) -> bool:
        """True if a document with this identity value exists"""
        query = self._id_filter(doc_id)
        return self.collection(collection_name).count_documents(query, limit=1) > 0

    def exists_custom(self, collection_name: str, query: dict) -> bool:
        """True if any document matches query"""
        validate_filter(query)
        return self.collection(collection_name).count_documents(query, limit=1) > 0

    def count(self, collection_name: str, query: Optional[dict] = None) -> int:
        """Number of documents matching query (all documents by default)"""
        query = {} if query is None else validate_filter(query)
        return self.collection(collection_name).count_documents(query)

    def aggregate(self, collection_name: str, pipeline: List[dict], **options) -> List[dict]:
        """Run an aggregation pipeline and return every result document"""
        pipeline = validate_pipeline(pipeline)
        return list(self.collection(collection_name).aggregate(pipeline, **options))
