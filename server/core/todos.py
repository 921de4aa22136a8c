# server/core/todos.py

from datetime import datetime, timezone
from sqlalchemy.orm import Session
from core import store
from core.errors import NotFound, ValidationError
from models import Todo
from models.todo import DEFAULT_PRIORITY
from models.types import as_utc


UPDATABLE_FIELDS = ("title", "description", "is_completed", "priority", "deadline")
NULLABLE_FIELDS = ("description",)


def serialize(todo: Todo) -> dict:
    return {
        "id": todo.id,
        "title": todo.title,
        "description": todo.description,
        "is_completed": todo.is_completed,
        "priority": todo.priority,
        "deadline": todo.deadline,
        "user_id": todo.user_id,
        "created_at": todo.created_at,
        "updated_at": todo.updated_at,
    }


def _owned_todo(db: Session, user_id: str, todo_id: str) -> Todo:
    """
    Loads a todo for its owner. A todo owned by someone else is reported
    exactly like a missing one.
    """
    todo = store.get_todo(db, todo_id)
    if todo is None or todo.user_id != user_id:
        raise NotFound("Todo not found")
    return todo


def list_todos(db: Session, user_id: str) -> list[Todo]:
    return store.list_todos(db, user_id)


def get_todo(db: Session, user_id: str, todo_id: str) -> Todo:
    return _owned_todo(db, user_id, todo_id)


def create_todo(
    db: Session,
    user_id: str,
    title: str | None,
    deadline: datetime | None,
    description: str | None = None,
    priority: int | None = None,
) -> Todo:
    if not title or deadline is None:
        raise ValidationError("Title and deadline are required")

    now = datetime.now(timezone.utc)
    return store.add_todo(db, Todo(
        title=title,
        description=description,
        is_completed=False,
        priority=DEFAULT_PRIORITY if priority is None else priority,
        deadline=as_utc(deadline),
        user_id=user_id,
        created_at=now,
        updated_at=now,
    ))


def update_todo(db: Session, user_id: str, todo_id: str, changes: dict) -> Todo:
    """
    Applies a partial update. Only keys present in `changes` are touched;
    an explicit None clears the description and is rejected elsewhere.
    """
    todo = _owned_todo(db, user_id, todo_id)

    updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    for field, value in updates.items():
        if field not in NULLABLE_FIELDS and (value is None or value == ""):
            raise ValidationError(f"{field} cannot be empty")
    if "deadline" in updates:
        updates["deadline"] = as_utc(updates["deadline"])

    for field, value in updates.items():
        setattr(todo, field, value)
    todo.updated_at = datetime.now(timezone.utc)

    store.save(db, todo)
    return todo


def delete_todo(db: Session, user_id: str, todo_id: str) -> None:
    todo = _owned_todo(db, user_id, todo_id)
    store.delete_todo(db, todo)
