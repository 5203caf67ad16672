from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer

from ..common.datetime_utils import now_local
from ..users.model import Identity
from .settings import AuthSettings


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class SessionTokenIssuer:
    """Signs identity claims into a time-limited token.

    Expiry is fixed from issuance: verifying a token never extends it.
    """

    def __init__(self, settings: AuthSettings):
        self._settings = settings
        self._serializer = URLSafeTimedSerializer(settings.secret_key, salt=settings.token_salt)

    @property
    def settings(self) -> AuthSettings:
        return self._settings

    def issue(self, identity: Identity) -> IssuedToken:
        token = self._serializer.dumps(identity.to_claims())
        return IssuedToken(token=token, expires_at=now_local() + self._settings.lifetime)

    def verify(self, token: Optional[str]) -> Optional[Identity]:
        if not token:
            return None
        try:
            claims = self._serializer.loads(token, max_age=int(self._settings.lifetime.total_seconds()))
        except BadSignature:
            # SignatureExpired is a BadSignature too
            return None
        try:
            return Identity.from_claims(claims)
        except (KeyError, TypeError, ValueError):
            return None
