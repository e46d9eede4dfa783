# file: PORTAL/USERS/user_routes.py
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from starlette.concurrency import run_in_threadpool

from PORTAL.core.errors import InvalidImage, InvalidInput, StorageError
from PORTAL.core.logger import log_to_cloud
from PORTAL.core.rate_limit import enforce_upload_limit
from PORTAL.core.security import UserInfo, current_user_id, current_user_record
from PORTAL.USERS.models import (
    MessageResponse,
    ProfileImageResponse,
    ProfileImageUploadResponse,
    UserInfoProfileImage,
)
from PORTAL.USERS.profile_image import ProfileImageService, encode_image

logger = logging.getLogger("users.routes")

router = APIRouter(prefix="/api", tags=["user"])


def get_profile_image_service(request: Request) -> ProfileImageService:
    return request.app.state.profile_images


def _storage_failure(user_id: str, action: str, e: Exception) -> HTTPException:
    logger.exception("Profile image %s failed for user_id=%s: %s", action, user_id, e)
    log_to_cloud("storage", "ERROR", f"profile image {action} failed", {"user_id": user_id})
    return HTTPException(status_code=500, detail=f"Failed to {action} profile image")


# ---------------------------
# CURRENT USER
# ---------------------------
@router.get("/user", response_model=UserInfoProfileImage)
async def current_user(
    user: UserInfo = Depends(current_user_record),
    service: ProfileImageService = Depends(get_profile_image_service),
):
    try:
        image = await run_in_threadpool(service.get_encoded, user.id)
    except StorageError as e:
        raise _storage_failure(user.id, "load", e)
    return UserInfoProfileImage(user=user, profile_image=image)


# ---------------------------
# PROFILE IMAGE
# ---------------------------
@router.post(
    "/user/profile-image",
    response_model=ProfileImageUploadResponse,
    dependencies=[Depends(enforce_upload_limit)],
)
async def upload_profile_image(
    request: Request,
    file: UploadFile = File(...),
    user_id: str = Depends(current_user_id),
    service: ProfileImageService = Depends(get_profile_image_service),
):
    """
    Replace the caller's profile image with a 120x120 JPEG of the upload.
    """
    max_bytes = request.app.state.config.max_upload_bytes
    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail="File too large")

    try:
        saved = await run_in_threadpool(service.save, user_id, content, file.content_type)
    except (InvalidInput, InvalidImage) as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        # StorageError and anything unexpected map to a generic 500
        raise _storage_failure(user_id, "upload", e)

    return ProfileImageUploadResponse(image_data=encode_image(saved.image_data))


@router.get("/user/profile-image", response_model=ProfileImageResponse)
async def get_profile_image(
    user_id: str = Depends(current_user_id),
    service: ProfileImageService = Depends(get_profile_image_service),
):
    try:
        image = await run_in_threadpool(service.get_encoded, user_id)
    except StorageError as e:
        raise _storage_failure(user_id, "load", e)
    return ProfileImageResponse(profile_image=image)


@router.delete("/user/profile-image", response_model=MessageResponse)
async def delete_profile_image(
    user_id: str = Depends(current_user_id),
    service: ProfileImageService = Depends(get_profile_image_service),
):
    try:
        await run_in_threadpool(service.delete, user_id)
    except StorageError as e:
        raise _storage_failure(user_id, "delete", e)
    return MessageResponse(message="Profile image deleted successfully")
