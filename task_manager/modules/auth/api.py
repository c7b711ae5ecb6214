from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from task_manager.db.session import get_db
from task_manager.modules.auth.model import User
from task_manager.modules.auth.schema import RegisterRequest, LoginRequest, UserResponse, AuthResponse
from task_manager.modules.auth import service
from task_manager.core.dependencies import get_current_user, get_hasher, get_signer
from task_manager.core.jwt import Signer
from task_manager.core.security import Hasher
from task_manager.core.response import success

from task_manager.routes.auth import USER_ROUTES, USER_PREFIX, USER_TAG

router = APIRouter(prefix=USER_PREFIX, tags=[USER_TAG])

_CLEAN_RESPONSES = {
    500: {"description": "Unexpected server error"},
}


@router.post(
    USER_ROUTES["register"],
    status_code=201,
    responses={
        201: {"description": "User registered successfully"},
        400: {"description": "Validation error or email already registered"},
        **_CLEAN_RESPONSES,
    },
)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
    hasher: Hasher = Depends(get_hasher),
    signer: Signer = Depends(get_signer),
):
    user, token = service.register_user(db, data, hasher, signer)
    return success(
        data=_serialize_auth(user, token),
        message="User registered successfully",
        status_code=201,
    )


@router.post(
    USER_ROUTES["login"],
    responses={
        200: {"description": "Login successful"},
        400: {"description": "Validation error"},
        401: {"description": "Invalid credentials"},
        **_CLEAN_RESPONSES,
    },
)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    hasher: Hasher = Depends(get_hasher),
    signer: Signer = Depends(get_signer),
):
    user, token = service.login_user(db, data, hasher, signer)
    return success(
        data=_serialize_auth(user, token),
        message="Login successful",
    )


@router.get(
    USER_ROUTES["me"],
    responses={
        200: {"description": "Current user info"},
        401: {"description": "Unauthorized"},
        404: {"description": "User not found"},
        **_CLEAN_RESPONSES,
    },
)
def me(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = service.get_current_identity(db, current_user.id)
    return success(data=_serialize_user(user), message="User retrieved successfully")


# ================================================================
# SERIALIZER
# ================================================================

def _serialize_user(user: User) -> dict:
    # hashed_password is never part of a response
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        createdAt=user.created_at,
    ).model_dump(mode="json")


def _serialize_auth(user: User, token: str) -> dict:
    return AuthResponse(user=_serialize_user(user), token=token).model_dump(mode="json")
