"""
auth/service.py

Registration, login and identity lookup.
  register → unique email check → hash password → persist → issue token
  login    → lookup by email → verify hash → issue token
Unknown email and wrong password fail the same way on purpose.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from task_manager.core.errors import AuthError, Conflict, Internal, NotFound
from task_manager.core.jwt import Signer
from task_manager.core.security import Hasher
from task_manager.core.logger import logger
from task_manager.modules.auth.model import User
from task_manager.modules.auth.schema import RegisterRequest, LoginRequest

DUPLICATE_EMAIL_MESSAGE = "User with this email already exists"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


class InvalidCredentials(AuthError):
    default_message = INVALID_CREDENTIALS_MESSAGE


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email)).first()


def register_user(db: Session, data: RegisterRequest, hasher: Hasher, signer: Signer) -> tuple[User, str]:
    if get_user_by_email(db, data.email):
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)

    user = User(
        name=data.name,
        email=data.email,
        hashed_password=hasher.hash(data.password),
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # lost a race against a concurrent registration with the same email
        db.rollback()
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[Register] DB error: {e}")
        raise Internal("Failed to register user. Please try again.")

    logger.info(f"New user registered: id={user.id}")
    return user, signer.issue(user.id)


def login_user(db: Session, data: LoginRequest, hasher: Hasher, signer: Signer) -> tuple[User, str]:
    user = get_user_by_email(db, data.email)

    if not user or not hasher.verify(data.password, user.hashed_password):
        logger.info("Rejected login attempt")
        raise InvalidCredentials()

    logger.info(f"User {user.id} logged in")
    return user, signer.issue(user.id)


def find_identity(db: Session, identity_id) -> User | None:
    try:
        user_id = int(identity_id)
    except (TypeError, ValueError):
        return None
    return db.get(User, user_id)


def get_current_identity(db: Session, identity_id) -> User:
    user = find_identity(db, identity_id)
    if not user:
        raise NotFound("User not found")
    return user
