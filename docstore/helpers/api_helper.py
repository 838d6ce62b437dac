"""
Helper functions shared by the API endpoints
"""

MAX_PAGE_LIMIT = 500


def make_list_api_response(values: list, start: int, limit: int,
                           is_last: bool, filter_str: str, total_count: int) -> dict:
    """
    make_list_api_response The response object every list GET returns

    :param values: List of documents in this page
    :param start: The start value used to generate the page
    :param limit: The value the results were limited to
    :param is_last: True if no documents follow this page
    :param filter_str: String containing the filters used to generate the data
    :param total_count: The total number of documents matching the filters
    :return A python dict in API format
    """

    data = {
        "size": len(values),
        "total_count": total_count,
        "limit": limit,
        "isLastPage": is_last,
        "values": values,
        "start": start,
        "filter": filter_str,
        "nextPageStart": None if is_last else start + limit
    }

    return data


def make_api_message(status, message: str) -> dict:
    """
    make_api_message Makes the status/message return object

    :param status: The status of the message, a word or an HTTP code
    :param message: The message to set
    :return The dict message object
    """

    data = {
        "status": status,
        "message": message
    }

    return data


def _read_int_arg(request_args, name: str, default: int, filter_str: str):
    """Read one integer argument and append it to the filter string"""
    if name not in request_args:
        return default, filter_str

    try:
        value = int(request_args[name])
    except (TypeError, ValueError) as ex:
        raise ValueError(f"Could not convert '{name}' query parameters to int.") from ex

    filter_str = "" if filter_str is None else filter_str
    set_filter = f"{name}={value}"
    filter_str = set_filter if len(filter_str) == 0 else filter_str + "&" + set_filter
    return value, filter_str


def get_start_limit(request_args, *, start_default, limit_default, current_filter):
    """
    get_start_limit Get the 'start' and 'limit' value from the request args

    :param request_args: The request args
    :param start_default: The default for 'start'
    :param limit_default: The default for 'limit'
    :param current_filter: Current filter string values
    :return Tuple with the start, limit, and filter values
    :raises ValueError: If a value is not an int or out of range
    """

    start, filter_str = _read_int_arg(request_args, "start", start_default, current_filter)
    limit, filter_str = _read_int_arg(request_args, "limit", limit_default, filter_str)

    if start < 0:
        raise ValueError("'start' must be greater than or equal to 0.")
    if limit < 1 or limit > MAX_PAGE_LIMIT:
        raise ValueError(f"'limit' must be between 1 and {MAX_PAGE_LIMIT}.")

    return start, limit, filter_str
