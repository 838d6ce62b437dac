"""
Helper handling the generic document endpoints
"""

from flask import jsonify, abort, current_app
from pymongo.errors import ConnectionFailure, DuplicateKeyError
from werkzeug.exceptions import HTTPException

from docstore.helpers.api_helper import make_list_api_response, get_start_limit
from docstore.helpers.query_parser import QueryParser
from docstore.helpers.validation import (
    coerce_document_id,
    generate_document_id,
    validate_document_id,
)
from docstore.repositories.repository_factory import RepositoryFactory


class DocumentHelper:
    """Helper providing CRUD operations for one collection.

    It validates request data, resolves path identifiers to stored
    identifiers, and maps repository and driver errors to HTTP errors.
    """

    def __init__(self, collection_name):
        self.collection_name = collection_name
        self.repository = RepositoryFactory.get(collection_name)

    @property
    def key_field(self):
        return self.repository.key_field

    def _candidates(self, key):
        return coerce_document_id(key, allow_object_id=self.key_field == "_id")

    def _resolve_key(self, key):
        """Return the stored identifier matching a path value, None if missing"""
        for candidate in self._candidates(key):
            if self.repository.exists(candidate):
                return candidate
        return None

    def _abort_for_store_error(self, action, error):
        """Map unexpected errors from the store to an HTTP error"""
        if isinstance(error, ConnectionFailure):
            current_app.logger.error(f"Document store unavailable while {action}: {str(error)}")
            abort(503, description="Document store unavailable")
        current_app.logger.error(f"Error {action}: {str(error)}")
        abort(500, description=f"Internal server error while {action}")

    def get_all(self, query_params=None):
        """
        Get all documents with optional filtering and pagination

        Args:
            query_params: Flask request.args object for query parameter filtering
        """
        try:
            parsed_filters, filter_string = QueryParser.parse_query_params(query_params)

            start, limit, combined_filter = get_start_limit(
                query_params or {},
                start_default=0,
                limit_default=50,
                current_filter=filter_string
            )

            results, total_count = self.repository.list_all_paginated(parsed_filters, start, limit)

            is_last = (start + limit) >= total_count

            return jsonify(make_list_api_response(
                results,
                start,
                limit,
                is_last,
                combined_filter,
                total_count
            )), 200

        except (ValueError, TypeError) as e:
            current_app.logger.warning(f"Invalid query parameters: {str(e)}")
            abort(400, description=f"Invalid query parameters: {str(e)}")
        except HTTPException as e:
            abort(e.code, description=e.description)
        except Exception as e:
            self._abort_for_store_error("retrieving documents", e)

    def get_by_key(self, key):
        """
        Get a single document by key

        Args:
            key: The identity value from the URL
        """
        if not key:
            abort(400, description="Key parameter is required")

        try:
            for candidate in self._candidates(key):
                item = self.repository.get(candidate)
                if item is not None:
                    return jsonify(item), 200
            abort(404, description=f"Document with {self.key_field} '{key}' not found")

        except HTTPException as e:
            abort(e.code, description=e.description)
        except Exception as e:
            self._abort_for_store_error(f"retrieving document '{key}'", e)

    def create(self, data, user):
        """
        Create a new document

        Args:
            data: The document from the request body
            user: The user creating the document
        """
        if not data:
            abort(400, description="Request body is required")
        if not isinstance(data, dict):
            abort(400, description="Request body must be a JSON object")

        try:
            document = dict(data)
            if self.key_field not in document and self.key_field != "_id":
                document[self.key_field] = generate_document_id()

            if self.key_field in document:
                key = validate_document_id(document[self.key_field])
                if self.repository.exists(key):
                    abort(409, description=f"Document with {self.key_field} '{key}' already exists")

            created_item = self.repository.create(document)
            current_app.logger.info(
                f"Created document '{created_item.get(self.key_field)}' in '{self.collection_name}' by {user}"
            )
            return jsonify(created_item), 201

        except (ValueError, TypeError) as e:
            current_app.logger.warning(f"Validation error during create: {str(e)}")
            abort(400, description=f"Validation error: {str(e)}")
        except DuplicateKeyError as e:
            current_app.logger.warning(f"Duplicate key during create: {str(e)}")
            abort(409, description="Document already exists")
        except HTTPException as e:
            abort(e.code, description=e.description)
        except Exception as e:
            self._abort_for_store_error("creating document", e)

    def update(self, key, data, user):
        """
        Update fields of an existing document

        Args:
            key: The identity value from the URL
            data: The fields to set
            user: The user updating the document
        """
        if not key:
            abort(400, description="Key parameter is required")
        if not data:
            abort(400, description="Request body is required")
        if not isinstance(data, dict):
            abort(400, description="Request body must be a JSON object")

        try:
            stored_key = self._resolve_key(key)
            if stored_key is None:
                abort(404, description=f"Document with {self.key_field} '{key}' not found")

            if self.key_field in data and str(data[self.key_field]) != str(stored_key):
                abort(400, description=f"Field '{self.key_field}' cannot be changed")

            updated_item = self.repository.update(stored_key, data)
            if updated_item is None:
                # Deleted between the existence check and the update
                abort(404, description=f"Document with {self.key_field} '{key}' not found")

            current_app.logger.info(f"Updated document '{stored_key}' in '{self.collection_name}' by {user}")
            return jsonify(updated_item), 200

        except (ValueError, TypeError) as e:
            current_app.logger.warning(f"Validation error during update: {str(e)}")
            abort(400, description=f"Validation error: {str(e)}")
        except DuplicateKeyError as e:
            current_app.logger.warning(f"Duplicate key during update: {str(e)}")
            abort(409, description="Update conflicts with an existing document")
        except HTTPException as e:
            abort(e.code, description=e.description)
        except Exception as e:
            self._abort_for_store_error(f"updating document '{key}'", e)

    def delete(self, key, user):
        """
        Delete a document

        Args:
            key: The identity value from the URL
            user: The user deleting the document
        """
        if not key:
            abort(400, description="Key parameter is required")

        try:
            stored_key = self._resolve_key(key)
            if stored_key is None:
                abort(404, description=f"Document with {self.key_field} '{key}' not found")

            if not self.repository.delete(stored_key):
                abort(404, description=f"Document with {self.key_field} '{key}' not found")

            current_app.logger.info(f"Deleted document '{stored_key}' from '{self.collection_name}' by {user}")
            return "", 204
        except HTTPException as e:
            abort(e.code, description=e.description)
        except Exception as e:
            self._abort_for_store_error(f"deleting document '{key}'", e)
