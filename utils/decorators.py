from __future__ import annotations
from functools import wraps
from flask import request, g, current_app

from services.exceptions import TokenInvalid

BEARER_PREFIX = "Bearer "


def bearer_token() -> str | None:
    """
    Token from the Authorization header with the "Bearer " scheme removed.
    A header without the scheme is taken as the bare token; None when absent.
    """
    auth = request.headers.get("Authorization")
    if auth is None:
        return None
    auth = auth.strip()
    if auth[:len(BEARER_PREFIX)].lower() == BEARER_PREFIX.lower():
        auth = auth[len(BEARER_PREFIX):]
    elif auth.lower() == BEARER_PREFIX.strip().lower():
        auth = ""
    return auth.strip()


def get_auth_service():
    return current_app.extensions["auth_service"]


def jwt_required():
    """
    Reject the request unless it carries a valid, unexpired, unrevoked
    session token. Attaches the token claims to g.current_claims.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise TokenInvalid(reason="missing_token")
            # TokenInvalid subclasses are rendered as 401 by api/errors.py
            g.current_claims = get_auth_service().authenticate(token)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
