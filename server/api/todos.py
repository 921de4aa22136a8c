# server/api/todos.py

from datetime import datetime
from pydantic import BaseModel
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from database import get_db
from api.auth import get_current_user
from core import todos


router = APIRouter(prefix="/api/todos", tags=["todos"])


class TodoCreateRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    priority: int | None = None
    deadline: datetime | None = None


class TodoUpdateRequest(BaseModel):
    """
    Partial update body. Fields left out of the JSON are not changed.
    """
    title: str | None = None
    description: str | None = None
    is_completed: bool | None = None
    priority: int | None = None
    deadline: datetime | None = None


@router.get("")
def list_todos(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return [todos.serialize(todo) for todo in todos.list_todos(db, user_id)]


@router.get("/{todo_id}")
def get_todo(todo_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return todos.serialize(todos.get_todo(db, user_id, todo_id))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_todo(
    req: TodoCreateRequest,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    todo = todos.create_todo(
        db,
        user_id,
        title=req.title,
        deadline=req.deadline,
        description=req.description,
        priority=req.priority,
    )
    return {"message": "Todo created successfully", "todo": todos.serialize(todo)}


@router.put("/{todo_id}")
def update_todo(
    todo_id: str,
    req: TodoUpdateRequest,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    todos.update_todo(db, user_id, todo_id, req.model_dump(exclude_unset=True))
    return {"message": "Todo updated successfully", "success": True}


@router.delete("/{todo_id}")
def delete_todo(todo_id: str, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    todos.delete_todo(db, user_id, todo_id)
    return {"message": "Todo deleted successfully", "success": True}
