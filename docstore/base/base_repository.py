"""Base repository interface for document store operations."""

class BaseRepository:
    """Base repository class defining the interface for database operations.

    Documents are addressed by an identity field chosen by the application
    rather than by the store's native primary key.
    """

    def __init__(self, key_field: str = "id"):
        """Initialize the repository with the specified key field.

        Args:
            key_field: The name of the field used as the document identity
        """
        self.key_field = key_field

    def create(self, item: dict):
        """Create a new item in the database.

        Args:
            item: The item data to create

        Returns:
            The created item
        """
        raise NotImplementedError

    def create_many(self, items: list):
        """Create several items in one call.

        Args:
            items: The items to create

        Returns:
            The list of keys of the created items
        """
        raise NotImplementedError

    def update(self, key, data: dict):
        """Update an existing item in the database.

        Args:
            key: The key of the item to update
            data: The fields to set

        Returns:
            The updated item, None if it does not exist
        """
        raise NotImplementedError

    def delete(self, key):
        """Delete an item from the database.

        Args:
            key: The key of the item to delete

        Returns:
            True if an item was deleted, False otherwise
        """
        raise NotImplementedError

    def get(self, key):
        """Get a single item by key.

        Args:
            key: The key of the item to retrieve

        Returns:
            The item if found, None otherwise
        """
        raise NotImplementedError

    def get_by_field(self, field_name: str, field_value):
        """
        Get a single item by a specific field value

        Args:
            field_name: Name of the field to search by
            field_value: Value to search for

        Returns:
            The item if found, None otherwise
        """
        raise NotImplementedError

    def exists(self, key) -> bool:
        """Check whether an item with this key exists."""
        raise NotImplementedError

    def list_all(self, filters: dict = None):
        """List all items with optional filtering.

        Args:
            filters: Optional parsed filters to apply

        Returns:
            List of items matching the criteria
        """
        raise NotImplementedError

    def list_all_paginated(self, filters: dict = None, start: int = 0, limit: int = 50):
        """
        List items with pagination and return total count

        Args:
            filters: Parsed filters from QueryParser
            start: Starting index for pagination
            limit: Maximum number of items to return

        Returns:
            Tuple of (results_list, total_count)
        """
        raise NotImplementedError

    def aggregate(self, pipeline: list):
        """Run an aggregation pipeline.

        Args:
            pipeline: List of pipeline stages

        Returns:
            List of result documents
        """
        raise NotImplementedError
