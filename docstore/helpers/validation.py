"""
Validation utilities for document store arguments
"""
import uuid
from collections.abc import Mapping
from typing import Any, List, Union

from bson import ObjectId


DocumentId = Union[str, int, ObjectId]


def validate_collection_name(name: str) -> str:
    """
    Validate a collection name against the MongoDB naming rules

    Args:
        name: Collection name to validate

    Returns:
        The validated collection name

    Raises:
        TypeError: If name is not a string
        ValueError: If name is empty or uses reserved characters
    """
    if not isinstance(name, str):
        raise TypeError("Collection name must be a string")

    if not name.strip():
        raise ValueError("Collection name cannot be empty")

    if "$" in name or "\x00" in name:
        raise ValueError(f"Invalid collection name '{name}'")

    if name.startswith("system."):
        raise ValueError(f"Collection name '{name}' is reserved")

    return name


def validate_field_name(name: str) -> str:
    """
    Validate the name of the identity field

    Raises:
        TypeError: If name is not a string
        ValueError: If name is empty or an operator
    """
    if not isinstance(name, str):
        raise TypeError("Field name must be a string")

    if not name.strip():
        raise ValueError("Field name cannot be empty")

    if name.startswith("$"):
        raise ValueError(f"Invalid field name '{name}'")

    return name


def validate_document_id(doc_id: DocumentId) -> DocumentId:
    """
    Validate a document identifier

    Identifiers are non-empty strings or integers, or ObjectIds when the
    native "_id" is the identity field. Booleans are rejected even though
    they are ints.

    Args:
        doc_id: Identifier to validate

    Returns:
        The validated identifier

    Raises:
        TypeError: If the identifier is not a str, int or ObjectId
        ValueError: If the identifier is an empty string
    """
    if isinstance(doc_id, bool) or not isinstance(doc_id, (str, int, ObjectId)):
        raise TypeError("Document id must be a string or an integer")

    if isinstance(doc_id, str) and not doc_id.strip():
        raise ValueError("Document id cannot be empty")

    return doc_id


def validate_filter(query: Mapping, *, allow_empty: bool = True) -> Mapping:
    """
    Validate a query filter

    Args:
        query: The filter document
        allow_empty: Whether an empty filter (match everything) is accepted

    Returns:
        The validated filter

    Raises:
        TypeError: If the filter is not a mapping
        ValueError: If the filter is empty and allow_empty is False
    """
    if not isinstance(query, Mapping):
        raise TypeError("Filter must be a mapping")

    if not allow_empty and len(query) == 0:
        raise ValueError("Filter cannot be empty")

    return query


def validate_document(document: Mapping) -> Mapping:
    """Validate a single document to insert"""
    if not isinstance(document, Mapping):
        raise TypeError("Document must be a mapping")

    return document


def validate_documents(documents: List[Mapping]) -> List[Mapping]:
    """
    Validate a list of documents to insert

    Raises:
        TypeError: If documents is not a list of mappings
        ValueError: If the list is empty
    """
    if not isinstance(documents, (list, tuple)):
        raise TypeError("Documents must be a list")

    if not documents:
        raise ValueError("Documents cannot be empty")

    for document in documents:
        validate_document(document)

    return list(documents)


def validate_update_data(data: Mapping) -> Mapping:
    """
    Validate the fields passed to a $set update

    Raises:
        TypeError: If data is not a mapping
        ValueError: If data is empty or contains operators
    """
    if not isinstance(data, Mapping):
        raise TypeError("Update data must be a mapping")

    if not data:
        raise ValueError("Update data cannot be empty")

    for key in data:
        if isinstance(key, str) and key.startswith("$"):
            raise ValueError(f"Update data cannot contain operator '{key}'")

    return data


def validate_pipeline(pipeline: List[Mapping]) -> List[Mapping]:
    """Validate an aggregation pipeline"""
    if not isinstance(pipeline, (list, tuple)):
        raise TypeError("Pipeline must be a list")

    for stage in pipeline:
        if not isinstance(stage, Mapping):
            raise TypeError("Pipeline stages must be mappings")

    return list(pipeline)


def generate_document_id() -> str:
    """
    Generate a unique identifier for documents created without one

    Returns:
        A 32 character hex string
    """
    return uuid.uuid4().hex


def coerce_document_id(value: Any, *, allow_object_id: bool = False) -> List[DocumentId]:
    """
    Candidate identifiers for a value taken from a URL path

    Path segments are always strings, but identifiers may be stored as
    integers or ObjectIds. The string form is tried first.

    Args:
        value: The raw path value
        allow_object_id: Also try the value as an ObjectId

    Returns:
        List of identifiers to try, in order
    """
    candidates = [value]
    if not isinstance(value, str):
        return candidates
    digits = value[1:] if value.startswith("-") else value
    if digits.isascii() and digits.isdigit():
        candidates.append(int(value))
    if allow_object_id and ObjectId.is_valid(value):
        candidates.append(ObjectId(value))
    return candidates
