"""
Generic Document API
"""

import json

from flask import (
    Blueprint, request, abort, current_app
)
from werkzeug.exceptions import HTTPException

from docstore.helpers.auth_helper import (
    load_auth, set_auth, require_auth, current_user
)
from docstore.helpers.document import DocumentHelper
from docstore.helpers.validation import validate_collection_name


bp = Blueprint('documents', __name__, url_prefix='/api/v2')
bp.before_request(load_auth)
bp.after_request(set_auth)


def load_helper(collection_name):
    """Build the helper for a collection, 404 when it is not exposed."""
    try:
        validate_collection_name(collection_name)
    except (TypeError, ValueError) as ex:
        abort(404, description=str(ex))

    exposed = current_app.config.get('DOCSTORE_COLLECTIONS') or []
    if exposed and collection_name not in exposed:
        abort(404, description=f"{collection_name} not supported")

    return DocumentHelper(collection_name)


def validate_json_request():
    """Validate that the request contains valid JSON data"""
    if not request.is_json:
        abort(400, description="Content-Type must be application/json")

    if not request.data:
        abort(400, description="Request body is required")

    try:
        return request.get_json()
    except (json.JSONDecodeError, HTTPException):
        abort(400, description="Invalid JSON in request body")


@bp.route('/<collection_name>', methods=['GET'])
def list_documents(collection_name):
    """List documents of a collection with filtering and pagination."""
    helper = load_helper(collection_name)
    return helper.get_all(query_params=request.args)


@bp.route('/<collection_name>/<string:doc_id>', methods=['GET'])
def get_document(collection_name, doc_id):
    """Get one document by its identity value."""
    helper = load_helper(collection_name)
    return helper.get_by_key(doc_id)


@bp.route('/<collection_name>', methods=['POST'])
@require_auth
def create_document(collection_name):
    """Create a document; the identity value is generated when missing."""
    helper = load_helper(collection_name)
    data = validate_json_request()
    return helper.create(data, current_user())


@bp.route('/<collection_name>/<string:doc_id>', methods=['PATCH'])
@require_auth
def update_document(collection_name, doc_id):
    """Set fields on an existing document."""
    helper = load_helper(collection_name)
    data = validate_json_request()
    return helper.update(doc_id, data, current_user())


@bp.route('/<collection_name>/<string:doc_id>', methods=['DELETE'])
@require_auth
def delete_document(collection_name, doc_id):
    """Delete a document by its identity value."""
    helper = load_helper(collection_name)
    return helper.delete(doc_id, current_user())
