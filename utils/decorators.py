from __future__ import annotations
from functools import wraps
from flask import request, g, current_app


def bearer_token() -> str | None:
    """Token from an ``Authorization: Bearer <token>`` header, if any."""
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def jwt_required():
    """
    Resolve the bearer access token to its account and expose it as
    ``g.current_user``. Failures propagate as AuthError and are rendered by
    the registered error handlers.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            manager = current_app.extensions["session_manager"]
            g.current_user = manager.identify(bearer_token())
            return fn(*args, **kwargs)

        return wrapper

    return decorator
