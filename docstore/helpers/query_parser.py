"""Query string parser turning list endpoint arguments into MongoDB filters."""

import math
from datetime import datetime
from typing import Dict, List, Any, Union, Tuple


class QueryParser:
    """
    Parser for query parameters that supports:
    - Simple equality: ?status=active
    - Multiple values: ?status=active&status=pending
    - Range operators on numbers and dates: ?age__gte=21, ?created_at__lt=2024-01-01
    - List membership: ?status__in=active,pending
    - Case-insensitive substring: ?name__contains=ak
    - Field presence: ?deleted_at__exists=false
    """

    # Supported comparison operators
    OPERATORS = {
        'eq': '$eq',
        'ne': '$ne',
        'gt': '$gt',
        'gte': '$gte',
        'lt': '$lt',
        'lte': '$lte',
        'in': '$in',
        'nin': '$nin',
        'exists': '$exists',
        'contains': '$regex',
        'regex': '$regex'
    }

    # Arguments consumed by pagination, never filters
    RESERVED_KEYS = ('start', 'limit', 'page', 'per_page')

    RANGE_OPERATORS = ('gt', 'gte', 'lt', 'lte')

    # ISO dates accepted as range bounds
    DATE_FORMATS = ('%Y-%m-%d', '%Y-%m-%dT%H:%M:%S', '%Y-%m-%dT%H:%M:%SZ')

    @classmethod
    def parse_query_params(cls, request_args) -> Tuple[Dict[str, Any], str]:
        """
        Parse query parameters into a filter dictionary and filter string

        Args:
            request_args: Flask request.args object

        Returns:
            Tuple of (filters_dict, filter_string)
        """
        filters = {}
        filter_parts = []

        if request_args is None:
            return filters, ""

        for key, values in request_args.lists():
            if key in cls.RESERVED_KEYS:
                continue

            parsed_key, operator = cls._parse_key(key)
            if parsed_key.startswith('$'):
                raise ValueError(f"Invalid filter field '{parsed_key}'")
            parsed_values = cls._parse_values(values, operator)

            if parsed_values:
                filters[parsed_key] = {
                    'operator': operator,
                    'values': parsed_values
                }

                # The echo uses the raw strings the client sent
                for value in values:
                    if operator == 'eq':
                        filter_parts.append(f"{parsed_key}={value}")
                    else:
                        filter_parts.append(f"{parsed_key}__{operator}={value}")

        filter_string = "&".join(filter_parts) if filter_parts else ""
        return filters, filter_string

    @classmethod
    def _parse_key(cls, key: str) -> Tuple[str, str]:
        """
        Split 'field__operator' into its parts; unknown operators mean equality

        Args:
            key: Query parameter key (e.g., 'status', 'created_dt__gt')

        Returns:
            Tuple of (field_name, operator)
        """
        if '__' in key:
            field_name, operator = key.rsplit('__', 1)
            if operator in cls.OPERATORS:
                return field_name, operator
        return key, 'eq'

    @classmethod
    def _parse_values(cls, values: List[str], operator: str) -> List[Any]:
        """Convert the raw strings to what the Mongo operator compares against"""
        if operator in cls.RANGE_OPERATORS:
            return [cls._parse_bound(value) for value in values]
        if operator in ('in', 'nin'):
            return [[item.strip() for item in value.split(',') if item.strip()] for value in values]
        if operator == 'exists':
            return [cls._parse_bool(value) for value in values]
        return list(values)

    @staticmethod
    def _parse_bool(value: str) -> bool:
        lowered = value.strip().lower()
        if lowered in ('1', 'true', 'yes'):
            return True
        if lowered in ('0', 'false', 'no'):
            return False
        raise ValueError(f"Could not convert '{value}' to a boolean")

    @classmethod
    def _parse_bound(cls, value: str) -> Union[int, float, datetime, str]:
        """
        Range bound for $gt/$gte/$lt/$lte

        BSON compares numbers across int and double, and dates only against
        datetimes, so numbers and ISO dates are converted. Anything else
        stays a string.
        """
        try:
            return int(value)
        except ValueError:
            pass

        try:
            number = float(value)
            if math.isfinite(number):
                return number
        except ValueError:
            pass

        for fmt in cls.DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue

        return value


def build_mongo_filter(parsed_filters: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert parsed filters to MongoDB query format

    Args:
        parsed_filters: Parsed filters from QueryParser

    Returns:
        MongoDB query dictionary
    """
    mongo_filters = {}

    for field, filter_info in parsed_filters.items():
        operator = filter_info['operator']
        values = filter_info['values']

        if operator == 'eq':
            if len(values) == 1:
                mongo_filters[field] = values[0]
            else:
                mongo_filters[field] = {'$in': values}
        elif operator == 'contains':
            mongo_filters[field] = {'$regex': values[0], '$options': 'i'}
        elif operator in QueryParser.OPERATORS:
            mongo_filters[field] = {QueryParser.OPERATORS[operator]: values[0]}

    return mongo_filters
