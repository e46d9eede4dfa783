# file: PORTAL/USERS/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from PORTAL.core.security import UserInfo


class UserInfoProfileImage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: UserInfo
    profile_image: Optional[str] = Field(None, alias="profileImage")


class ProfileImageResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    profile_image: Optional[str] = Field(None, alias="profileImage")


class ProfileImageUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: str = Field(..., alias="imageData")


class MessageResponse(BaseModel):
    message: str
