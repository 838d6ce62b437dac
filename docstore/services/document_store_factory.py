"""
Document store factory for managing the shared DocumentStoreClient
"""

from docstore.services.document_store import DocumentStoreClient


class DocumentStoreFactory:
    """
    Factory class for managing the document store client.
    Provides a singleton pattern for the client.
    """

    _instance = None
    _configured = False

    @staticmethod
    def client_options(flask_app) -> dict:
        """
        Build the MongoClient keyword arguments from the Flask config

        Args:
            flask_app: Flask application instance

        Returns:
            dict: Options for pymongo.MongoClient
        """
        options = {
            'serverSelectionTimeoutMS': flask_app.config.get('MONGODB_SERVER_SELECTION_TIMEOUT_MS', 5000),
            'connectTimeoutMS': flask_app.config.get('MONGODB_CONNECT_TIMEOUT_MS', 10000),
            'maxPoolSize': flask_app.config.get('MONGODB_MAX_POOL_SIZE', 100),
            'retryWrites': True,
        }
        return options

    @classmethod
    def configure(cls, flask_app):
        """
        Configure the document store factory with Flask app

        Args:
            flask_app: Flask application instance
        """
        if not cls._configured:
            cls._instance = DocumentStoreClient(
                flask_app.config.get('MONGODB_URI'),
                flask_app.config.get('MONGODB_DATABASE'),
                id_field=flask_app.config.get('MONGODB_ID_FIELD', 'id'),
                client_options=cls.client_options(flask_app)
            )
            if flask_app.config.get('MONGODB_CONNECT_EAGERLY', False):
                # A failed eager connect leaves the client disconnected; the
                # next operation connects on demand
                try:
                    cls._instance.connect()
                except Exception as e:
                    flask_app.logger.error(f"Eager MongoDB connection failed: {str(e)}")
            cls._configured = True

    @classmethod
    def get_client(cls) -> DocumentStoreClient:
        """
        Get the configured document store client

        Returns:
            DocumentStoreClient: Configured client instance

        Raises:
            RuntimeError: If factory is not configured
        """
        if not cls._configured or not cls._instance:
            raise RuntimeError("DocumentStoreFactory not configured. Call configure() first.")

        return cls._instance

    @classmethod
    def health_check(cls) -> dict:
        """
        Perform health check on the document store

        Returns:
            dict: Health check results
        """
        try:
            client = cls.get_client()
            return client.health_check()
        except Exception as e:
            return {
                'status': 'unhealthy',
                'message': f'Document store not available: {str(e)}',
                'connected': False
            }

    @classmethod
    def close(cls):
        """Close the document store connection"""
        if cls._instance:
            cls._instance.close()
            cls._instance = None
            cls._configured = False
