"""
Sanity check API for the Flask application and the document store
"""

from flask import (
    Blueprint, jsonify, current_app
)

from docstore.helpers.api_helper import (
    make_api_message
)
from docstore.helpers.auth_helper import (
    set_auth
)
from docstore.services.document_store_factory import DocumentStoreFactory


bp = Blueprint('health', __name__, url_prefix='/api/v1')
bp.after_request(set_auth)


@bp.route('/health/flask', methods=('GET',))
def get_health_flask():
    """
    get_health_flask API call to verify the health of the Flask Application

    :return A JSON of a data object with a message
    """

    data = make_api_message("success", "Flask is running")
    return jsonify(data)


@bp.route('/health/docstore', methods=('GET',))
def get_health_docstore():
    """
    get_health_docstore API call to verify the document store answers a ping.
    Connects on demand when the store is not connected yet.

    :return A JSON health object, 503 when the store is unhealthy
    """

    result = DocumentStoreFactory.health_check()
    if result.get('status') != 'healthy':
        current_app.logger.warning("[DOCSTORE] %s", result.get('message'))
        return jsonify(result), 503
    return jsonify(result)
