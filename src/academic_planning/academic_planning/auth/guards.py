from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import g, jsonify, request, session

from ..core.constants import UNAUTHENTICATED_MESSAGE
from ..users.model import Identity
from .tokens import SessionTokenIssuer

SESSION_TOKEN_KEY = "access_token"


def resolve_identity(issuer: SessionTokenIssuer) -> Optional[Identity]:
    """Identity from an ``Authorization: Bearer`` header, else from the session cookie."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return issuer.verify(header[7:].strip())
    return issuer.verify(session.get(SESSION_TOKEN_KEY))


def make_login_required(issuer: SessionTokenIssuer):
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = resolve_identity(issuer)
            if identity is None:
                return jsonify({"error": UNAUTHENTICATED_MESSAGE}), 401
            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    return login_required


def current_identity() -> Identity:
    return g.identity
