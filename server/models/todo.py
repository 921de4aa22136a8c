# server/models/todo.py

import uuid
from sqlalchemy import Column, String, Text, Boolean, Integer, ForeignKey
from . import Base
from .types import UTCDateTime, utcnow


DEFAULT_PRIORITY = 5


class Todo(Base):
    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    # 1-10 by convention, not enforced
    priority = Column(Integer, default=DEFAULT_PRIORITY, nullable=False)
    deadline = Column(UTCDateTime, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)
