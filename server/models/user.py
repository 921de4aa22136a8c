# server/models/user.py

import uuid
from sqlalchemy import Column, String
from . import Base
from .types import UTCDateTime, utcnow


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Username and email are unique at the storage level; the password column
    only ever holds a bcrypt hash.
    """
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    profile_picture = Column(String, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
