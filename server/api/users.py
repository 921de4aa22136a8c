# server/api/users.py

from pydantic import BaseModel, ConfigDict, Field
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from database import get_db
from api.auth import get_current_user
from core import profiles


router = APIRouter(prefix="/api/users", tags=["users"])


class ProfileUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    profile_picture: str | None = None


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str | None = Field(None, alias="currentPassword")
    new_password: str | None = Field(None, alias="newPassword")


@router.get("/profile")
def get_profile(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return profiles.get_profile(db, user_id)


@router.put("/profile")
def update_profile(
    req: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profiles.update_profile(db, user_id, req.model_dump(exclude_unset=True))
    return {"message": "Profile updated successfully", "success": True}


@router.put("/change-password")
def change_password(
    req: ChangePasswordRequest,
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profiles.change_password(db, user_id, req.current_password, req.new_password)
    return {"message": "Password changed successfully", "success": True}
