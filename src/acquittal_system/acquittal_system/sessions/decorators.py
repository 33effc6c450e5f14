from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import g, jsonify, request

from ..core.exceptions import InvalidToken
from ..users.model import User
from .token_service import TokenService


def bearer_token() -> Optional[str]:
    """Extract the token from `Authorization: Bearer <token>`."""

    header = request.headers.get("Authorization", "")
    parts = header.split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip() or None


def make_token_required(tokens: TokenService, load_user: Callable[[int], Optional[User]]):
    """Build the `token_required` decorator for protected routes.

    The user is re-read from the store on every request, so a deleted account
    loses access immediately. The resolved user lives on `flask.g` for the
    current request only.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                return jsonify({"error": "Access token required"}), 401

            try:
                identity = tokens.verify(token)
            except InvalidToken:
                return jsonify({"error": "Invalid token"}), 403

            user = load_user(identity.user_id)
            if not user:
                return jsonify({"error": "Invalid token"}), 401

            g.current_user = user
            return view(*args, **kwargs)

        return wrapper

    return token_required


def current_user() -> User:
    return g.current_user
