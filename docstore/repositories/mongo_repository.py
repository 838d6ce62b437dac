"""MongoDB repository implementation for document operations."""

from bson import ObjectId

from docstore.base.base_repository import BaseRepository
from docstore.helpers.query_parser import build_mongo_filter
from docstore.helpers.validation import validate_document_id


def convert_object_ids_to_str(obj):
    """
    Recursively convert ObjectId values to strings for JSON serialization

    Args:
        obj: The object to convert (dict, list, or primitive type)

    Returns:
        The converted object with ObjectIds replaced by their hex strings
    """
    if isinstance(obj, dict):
        return {key: convert_object_ids_to_str(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [convert_object_ids_to_str(item) for item in obj]
    if isinstance(obj, ObjectId):
        return str(obj)
    # Return as is if not ObjectId
    return obj


class MongoRepository(BaseRepository):
    """MongoDB repository implementation providing CRUD operations.

    One repository is bound to one collection. All calls go through the
    shared DocumentStoreClient; driver errors are not caught here.
    """

    def __init__(self, collection_name: str, key_field: str = "id", store_client=None):
        super().__init__(key_field)
        if store_client is None:
            raise ValueError("store_client must be provided")
        self.collection_name = collection_name
        self.store = store_client

    def _to_external(self, document):
        """Strip the native primary key unless it is the identity field"""
        if document is None:
            return None
        document = dict(document)
        if self.key_field != "_id":
            document.pop("_id", None)
        return convert_object_ids_to_str(document)

    def _key_filter(self, key) -> dict:
        return {self.key_field: validate_document_id(key)}

    def create(self, item: dict):
        """Insert a document and return it as stored"""
        # insert_one adds "_id" to the dict it is given
        document = dict(item)
        result = self.store.add(self.collection_name, document)
        if self.key_field == "_id":
            document["_id"] = result.inserted_id
        return self._to_external(document)

    def create_many(self, items: list):
        """Insert documents and return their identity values"""
        documents = [dict(item) for item in items]
        result = self.store.add_many(self.collection_name, documents)
        if self.key_field == "_id":
            return convert_object_ids_to_str(list(result.inserted_ids))
        return [document.get(self.key_field) for document in documents]

    def update(self, key, data: dict):
        """Set fields on a document and return the refreshed version"""
        data = dict(data)
        data.pop(self.key_field, None)

        if not data:
            # Return existing item if no data to update
            return self.get(key)

        result = self.store.update_custom(self.collection_name, self._key_filter(key), data)
        if result.matched_count == 0:
            return None
        return self.get(key)

    def delete(self, key):
        """Delete a document by key"""
        result = self.store.delete_custom(self.collection_name, self._key_filter(key))
        return result.deleted_count > 0

    def get(self, key):
        """Get a single document by key"""
        return self._to_external(self.store.get_custom(self.collection_name, self._key_filter(key)))

    def get_by_field(self, field_name: str, field_value):
        """
        Get a single document by a specific field value

        Args:
            field_name: Name of the field to search by
            field_value: Value to search for

        Returns:
            The document if found, None otherwise
        """
        document = self.store.get_custom(self.collection_name, {field_name: field_value})
        return self._to_external(document)

    def exists(self, key) -> bool:
        """Check whether a document with this key exists"""
        return self.store.exists_custom(self.collection_name, self._key_filter(key))

    def list_all(self, filters: dict = None):
        """List all documents matching the parsed filters"""
        query = build_mongo_filter(filters or {})
        documents = self.store.get_all_custom(self.collection_name, query)
        return [self._to_external(document) for document in documents]

    def list_all_paginated(self, filters: dict = None, start: int = 0, limit: int = 50):
        """
        List documents with pagination and return total count

        Args:
            filters: Parsed filters from QueryParser
            start: Starting index for pagination
            limit: Maximum number of items to return

        Returns:
            Tuple of (results_list, total_count)
        """
        if start < 0 or limit < 1:
            raise ValueError("'start' must be >= 0 and 'limit' must be >= 1")

        query = build_mongo_filter(filters or {})
        total_count = self.store.count(self.collection_name, query)
        documents = self.store.get_all_custom(
            self.collection_name,
            query,
            skip=start,
            limit=limit,
            sort=[(self.key_field, 1)]
        )
        return [self._to_external(document) for document in documents], total_count

    def aggregate(self, pipeline: list):
        """Run an aggregation pipeline on the collection"""
        documents = self.store.aggregate(self.collection_name, pipeline)
        return [convert_object_ids_to_str(document) for document in documents]
