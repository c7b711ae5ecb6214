from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from task_manager.db.session import get_db
from task_manager.core.errors import AuthError
from task_manager.core.jwt import InvalidToken, Signer
from task_manager.core.logger import logger
from task_manager.core.security import Hasher
from task_manager.modules.auth.model import User
from task_manager.modules.auth.service import find_identity
from task_manager.modules.tasks.store import SqlTaskStore, TaskStore

MISSING_TOKEN_MESSAGE = "Not authorized to access this route. Please login."
INVALID_TOKEN_MESSAGE = "Not authorized. Token verification failed."
UNKNOWN_IDENTITY_MESSAGE = "User not found. Token may be invalid."

# documents the scheme in OpenAPI; the header itself is parsed by extract_bearer_token
bearer_scheme = HTTPBearer(auto_error=False)


def get_hasher(request: Request) -> Hasher:
    return request.app.state.hasher


def get_signer(request: Request) -> Signer:
    return request.app.state.signer


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Only the exact form 'Bearer <token>' is accepted."""
    if not header:
        return None
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        return None
    return parts[1]


def authorize(authorization: Optional[str], db: Session, signer: Signer) -> User:
    """
    Extract → verify → resolve. Any failed step is a 401 and the handler never runs.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthError(MISSING_TOKEN_MESSAGE)

    try:
        identity_id = signer.verify(token)
    except InvalidToken:
        # expired and tampered tokens look the same to the caller
        logger.debug("Token verification failed")
        raise AuthError(INVALID_TOKEN_MESSAGE)

    user = find_identity(db, identity_id)
    if not user:
        raise AuthError(UNKNOWN_IDENTITY_MESSAGE)
    return user


def get_current_user(
    request: Request,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    signer: Signer = Depends(get_signer),
) -> User:
    return authorize(request.headers.get("Authorization"), db, signer)


def _ownerless(request: Request) -> bool:
    return not request.app.state.settings.auth_enabled


def get_request_identity(
    request: Request,
    _credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Optional[Session] = Depends(get_db),
    signer: Signer = Depends(get_signer),
) -> Optional[User]:
    """
    Identity for task routes.
    Ownerless mode → None (owner checks are skipped everywhere).
    Owned mode     → the verified User, or a 401 before the handler runs.
    """
    if _ownerless(request):
        return None

    return authorize(request.headers.get("Authorization"), db, signer)


def get_task_store(request: Request, db: Optional[Session] = Depends(get_db)) -> TaskStore:
    # same cached session as get_request_identity within one request
    if _ownerless(request):
        return request.app.state.task_store
    return SqlTaskStore(db)
