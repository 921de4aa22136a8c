# server/core/store.py

"""
Data access for the users and todos tables.

Every function takes the request-scoped Session handed out by database.get_db.
Driver failures never leave this module raw: unique-constraint violations
become Conflict, anything else becomes ServerError.
"""

import logging
import re
from contextlib import contextmanager
from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from core.errors import Conflict, ServerError
from models import Todo, User


logger = logging.getLogger(__name__)

# sqlite: "UNIQUE constraint failed: users.username"
# mysql: "Duplicate entry '...' for key 'users.ix_users_username'"
_CONSTRAINT_IN_MESSAGE = re.compile(r"UNIQUE constraint failed: ([\w.]+)|for key '([^']+)'")


def violated_constraint(error: IntegrityError) -> str:
    """
    Name of the constraint (or table.column) an IntegrityError tripped over.
    Never derived from the offending value, which drivers also echo back.
    """
    diag = getattr(error.orig, "diag", None)
    name = getattr(diag, "constraint_name", None)
    if name:
        return name.lower()
    match = _CONSTRAINT_IN_MESSAGE.search(str(error.orig))
    if match:
        return (match.group(1) or match.group(2)).lower()
    return ""


def conflict_from(error: IntegrityError) -> Conflict:
    constraint = violated_constraint(error)
    if constraint.endswith("username"):
        return Conflict("Username already exists")
    if constraint.endswith("email"):
        return Conflict("Email already exists")
    return Conflict()


@contextmanager
def _guard(db: Session):
    try:
        yield
    except IntegrityError as e:
        db.rollback()
        logger.info("Constraint violation: %s", e.orig)
        raise conflict_from(e)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database operation failed")
        raise ServerError()


# -------------------------------
# Users
# -------------------------------

def get_user(db: Session, user_id: str) -> User | None:
    with _guard(db):
        return db.get(User, user_id)


def find_user_by_username(db: Session, username: str) -> User | None:
    with _guard(db):
        return db.query(User).filter(User.username == username).first()


def find_user_by_email(db: Session, email: str) -> User | None:
    with _guard(db):
        return db.query(User).filter(User.email == email).first()


def add_user(db: Session, user: User) -> User:
    with _guard(db):
        db.add(user)
        db.commit()
        db.refresh(user)
    return user


# -------------------------------
# Todos
# -------------------------------

def list_todos(db: Session, user_id: str) -> list[Todo]:
    with _guard(db):
        return (
            db.query(Todo)
            .filter(Todo.user_id == user_id)
            .order_by(Todo.created_at.asc(), Todo.id.asc())
            .all()
        )


def get_todo(db: Session, todo_id: str) -> Todo | None:
    with _guard(db):
        return db.get(Todo, todo_id)


def add_todo(db: Session, todo: Todo) -> Todo:
    with _guard(db):
        db.add(todo)
        db.commit()
        db.refresh(todo)
    return todo


def delete_todo(db: Session, todo: Todo) -> None:
    with _guard(db):
        db.delete(todo)
        db.commit()


def count_todos(db: Session, user_id: str) -> tuple[int, int]:
    """
    Returns (total, completed) for the user's todos in one query.
    """
    with _guard(db):
        total, completed = (
            db.query(
                func.count(Todo.id),
                func.coalesce(func.sum(case((Todo.is_completed.is_(True), 1), else_=0)), 0),
            )
            .filter(Todo.user_id == user_id)
            .one()
        )
    return int(total), int(completed)


def save(db: Session, *rows) -> None:
    """
    Commits pending changes to rows already loaded through this session.
    """
    with _guard(db):
        db.commit()
        for row in rows:
            db.refresh(row)
