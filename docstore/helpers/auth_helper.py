"""
Helper to authenticate document API calls with HS256 JWTs
"""

import functools
import jwt

from flask import (
    g, current_app, request, abort
)


def load_auth():
    """
    load_auth Called before endpoint entry. Sets g.claimset and g.jwt from
    the bearer token in the Authorization header. Invalid tokens leave both empty.

    :return None
    """

    g.claimset = {}
    g.jwt = None

    header = request.headers.get('Authorization', None)
    if not header:
        return

    token = header.replace("Bearer", "", 1).strip()
    if not token:
        return

    try:
        g.claimset = jwt.decode(token,
                                key=current_app.config['JWT_SECRET_KEY'],
                                algorithms=['HS256'])
        g.jwt = token
    except jwt.exceptions.InvalidTokenError:
        g.claimset = {}
        g.jwt = None
    except Exception as ex:
        g.claimset = {}
        g.jwt = None
        current_app.logger.error(f"JWT Decode Error: {str(ex)}")


def set_auth(response):
    """
    set_auth Called on endpoint leave. Adds the CORS headers.

    :return The response object for flask calls
    """

    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = 'Content-Type,Authorization'
    response.headers["Access-Control-Allow-Methods"] = 'GET,PATCH,POST,DELETE,OPTIONS'
    response.headers["Access-Control-Allow-Credentials"] = 'true'

    return response


def current_user() -> str:
    """Name of the authenticated user, 'unknown' without a token"""
    claimset = g.get('claimset') or {}
    return claimset.get('user_name', 'unknown')


def require_auth(func):
    """
    require_auth decorator aborting with 401 unless a valid JWT was loaded
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if g.get('jwt') is not None and g.get('claimset'):
            return func(*args, **kwargs)
        abort(401, description="Unauthorized")

    return wrapper
