"""
Flask error handlers
"""

from flask import (
    current_app, jsonify
)

from docstore.helpers.api_helper import (
    make_api_message
)


def handle_error(error):
    """
    handle_error Render an HTTPException as the API message object

    :return JSON with error message and the error status code
    """

    code = getattr(error, "code", None) or 500
    description = getattr(error, "description", None) or "An error occurred"

    if code >= 500:
        current_app.logger.error(f"[{code}] {description}")

    return_data = make_api_message(code, description)

    return jsonify(return_data), code
