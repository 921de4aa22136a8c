# server/core/profiles.py

import logging
from sqlalchemy.orm import Session
from core import store
from core.accounts import public_profile
from core.errors import Conflict, NotFound, Unauthenticated, ValidationError
from core.security import hash_password, verify_password
from models import User


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "email", "phone", "profile_picture")
NULLABLE_FIELDS = ("profile_picture",)


def _load_user(db: Session, user_id: str) -> User:
    # a valid token can outlive its account
    user = store.get_user(db, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def todo_statistics(total: int, completed: int) -> dict:
    efficiency = round(completed / total * 100, 2) if total > 0 else 0
    return {
        "totalTodos": total,
        "completedTodos": completed,
        "efficiency": efficiency,
    }


def get_profile(db: Session, user_id: str) -> dict:
    user = _load_user(db, user_id)
    total, completed = store.count_todos(db, user_id)
    return {
        "user": public_profile(user),
        "statistics": todo_statistics(total, completed),
    }


def update_profile(db: Session, user_id: str, changes: dict) -> User:
    user = _load_user(db, user_id)

    updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    for field, value in updates.items():
        if field not in NULLABLE_FIELDS and (value is None or value == ""):
            raise ValidationError(f"{field} cannot be empty")

    new_email = updates.get("email")
    if new_email and new_email != user.email:
        existing = store.find_user_by_email(db, new_email)
        if existing is not None and existing.id != user.id:
            raise Conflict("Email already in use")

    for field, value in updates.items():
        setattr(user, field, value)

    store.save(db, user)
    return user


def change_password(
    db: Session,
    user_id: str,
    current_password: str | None,
    new_password: str | None,
) -> None:
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    user = _load_user(db, user_id)
    if not verify_password(current_password, user.password):
        logger.info("Rejected password change for user %s", user_id)
        raise Unauthenticated("Current password is incorrect")

    user.password = hash_password(new_password)
    store.save(db, user)
