"""
Flask Application init
"""

import logging
import os

from flask import Flask

import docstore.helpers.error as dserror
from docstore.repositories.repository_factory import RepositoryFactory
from docstore.services.document_store import DocumentStoreClient
from docstore.services.document_store_factory import DocumentStoreFactory


__all__ = ["create_app", "DocumentStoreClient"]


def create_app(config_object=None):
    """
    create_app Will setup the Flask application, all blueprints and the document store client

    :param config_object: Config class or import path, defaults to APP_SETTINGS
    """
    from docstore.api_v1 import health
    from docstore.api_v2 import documents

    # create and configure the flask_application
    flask_application = Flask(__name__, instance_relative_config=True)

    # load the app config values from the config python file
    app_settings = config_object or os.getenv('APP_SETTINGS', 'docstore.config.DevelopmentConfig')
    flask_application.config.from_object(app_settings)

    # Configure logging
    if flask_application.debug:
        flask_application.logger.setLevel(logging.DEBUG)
    else:
        flask_application.logger.setLevel(logging.INFO)

    # Setup the document store and the repositories on top of it
    DocumentStoreFactory.configure(flask_application)
    RepositoryFactory.configure(
        flask_application.config.get('DATABASE_BACKEND', 'mongo'),
        store_client=DocumentStoreFactory.get_client()
    )

    # load api endpoints
    flask_application.register_blueprint(health.bp)
    flask_application.register_blueprint(documents.bp)

    # Setup the Error handlers
    for code in [400, 401, 403, 404, 405, 409, 500, 503]:
        flask_application.register_error_handler(code, dserror.handle_error)

    return flask_application
