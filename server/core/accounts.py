# server/core/accounts.py

import logging
from sqlalchemy.orm import Session
from core import store
from core.errors import Conflict, InvalidCredentials, ValidationError
from core.security import hash_password, issue, verify_password
from models import User


logger = logging.getLogger(__name__)


def public_profile(user: User) -> dict:
    """
    Everything about a user that may leave the server. Never the password hash.
    """
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "username": user.username,
        "profile_picture": user.profile_picture,
        "created_at": user.created_at,
    }


def register(
    db: Session,
    name: str | None,
    email: str | None,
    phone: str | None,
    username: str | None,
    password: str | None,
    profile_picture: str | None = None,
) -> User:
    if not all([name, email, phone, username, password]):
        raise ValidationError("Please provide all required fields")

    if store.find_user_by_username(db, username):
        raise Conflict("Username already exists")
    if store.find_user_by_email(db, email):
        raise Conflict("Email already exists")

    # a concurrent registration can still slip past the checks above;
    # the unique constraints turn that into Conflict inside add_user
    user = store.add_user(db, User(
        name=name,
        email=email,
        phone=phone,
        username=username,
        password=hash_password(password),
        profile_picture=profile_picture,
    ))
    logger.info("Registered user %s (%s)", user.username, user.id)
    return user


def login(db: Session, username: str | None, password: str | None) -> dict:
    if not username or not password:
        raise ValidationError("Please provide username and password")

    user = store.find_user_by_username(db, username)
    if not user or not verify_password(password, user.password):
        logger.info("Failed login for username %r", username)
        raise InvalidCredentials()

    return {
        "access_token": issue(user.id),
        "token_type": "bearer",
        "user": {
            "id": user.id,
            "username": user.username,
            "name": user.name,
            "email": user.email,
        },
    }
