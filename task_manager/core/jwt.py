from typing import Protocol

import jwt
from datetime import datetime, timedelta, timezone

ALGORITHM = "HS256"
TOKEN_TYPE = "access"


class InvalidToken(Exception):
    """Signature mismatch, malformed payload or expired token. Callers must not tell them apart."""


class Signer(Protocol):
    def issue(self, identity_id) -> str: ...

    def verify(self, token: str) -> str: ...


class JWTSigner:
    def __init__(self, secret: str, expires_delta: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.expires_delta = expires_delta

    def issue(self, identity_id) -> str:
        return create_access_token(
            data={"sub": str(identity_id), "type": TOKEN_TYPE},
            secret=self.secret,
            expires_delta=self.expires_delta,
        )

    def verify(self, token: str) -> str:
        payload = decode_token(token, self.secret)
        if not payload or payload.get("type") != TOKEN_TYPE:
            raise InvalidToken()

        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise InvalidToken()
        return sub


def create_access_token(data: dict, secret: str, expires_delta: timedelta = timedelta(days=7)) -> str:
    now = datetime.now(timezone.utc)
    to_encode = data.copy()
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_token(token: str, secret: str) -> dict | None:
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError:
        # ExpiredSignatureError is a subclass
        return None
