"""
A Repository factory to control database type and collection access
"""


class RepositoryFactory:
    """Factory class for creating and managing repository instances.

    This factory provides a centralized way to create one repository per
    collection on top of the shared document store client.
    """
    _instances = {}
    _backend = None
    _store_client = None
    _key_field = "id"

    @classmethod
    def configure(cls, backend: str, *, store_client=None, key_field: str = None):
        """Configure the repository factory with backend and client.

        Args:
            backend: Database backend type ('mongo')
            store_client: DocumentStoreClient instance
            key_field: Default identity field for new repositories
        """
        cls._backend = backend.lower()
        cls._store_client = store_client
        cls._instances = {}
        if key_field:
            cls._key_field = key_field
        elif store_client is not None:
            cls._key_field = store_client.id_field
        else:
            cls._key_field = "id"

    @classmethod
    def get(cls, collection_name: str, *, key_field=None):
        """Get or create a repository instance for the specified collection.

        Args:
            collection_name: Collection the repository will handle
            key_field: Field name to use as identity, defaults to the configured one

        Returns:
            Repository instance for the specified collection

        Raises:
            ValueError: If factory is not configured or backend is unsupported
        """
        if cls._backend is None:
            raise ValueError("RepositoryFactory not configured.")

        key_field = key_field or cls._key_field
        cache_key = (collection_name, key_field)
        if cache_key in cls._instances:
            return cls._instances[cache_key]

        if cls._backend == "mongo":
            # Lazy import to avoid importing the driver at module import time
            from docstore.repositories.mongo_repository import MongoRepository
            repo = MongoRepository(
                collection_name=collection_name,
                key_field=key_field,
                store_client=cls._store_client
            )
        else:
            raise ValueError(f"Unsupported backend: {cls._backend}")

        cls._instances[cache_key] = repo
        return repo
