# file: PORTAL/USERS/repository.py
import logging
import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from google.api_core import exceptions as gcp_exceptions
from pydantic import BaseModel

from PORTAL.core.config import PROFILE_IMAGE_COLLECTION
from PORTAL.core.errors import StorageError

logger = logging.getLogger("users.repository")


class ProfileImage(BaseModel):
    user_id: str
    image_data: bytes


class ProfileImageRepository(Protocol):
    def find_by_user_id(self, user_id: str) -> Optional[ProfileImage]: ...

    def save(self, image: ProfileImage) -> ProfileImage: ...

    def delete(self, user_id: str) -> None: ...


# ---------------------------
# Firestore
# ---------------------------
class FirestoreProfileImageRepository:
    """One document per user under PROFILE_IMAGES/{user_id}."""

    def __init__(self, db, collection: str = PROFILE_IMAGE_COLLECTION):
        self.db = db
        self.collection = collection

    def _doc(self, user_id: str):
        return self.db.collection(self.collection).document(user_id)

    def find_by_user_id(self, user_id: str) -> Optional[ProfileImage]:
        try:
            snap = self._doc(user_id).get()
        except gcp_exceptions.GoogleAPICallError as e:
            raise StorageError(f"Failed to read profile image for {user_id}") from e

        if not snap.exists:
            return None
        data = snap.to_dict() or {}
        return ProfileImage(user_id=user_id, image_data=data.get("image_data", b""))

    def save(self, image: ProfileImage) -> ProfileImage:
        try:
            # set() without merge replaces the whole document
            self._doc(image.user_id).set({
                "user_id": image.user_id,
                "image_data": image.image_data,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
        except gcp_exceptions.GoogleAPICallError as e:
            raise StorageError(f"Failed to save profile image for {image.user_id}") from e
        return image

    def delete(self, user_id: str) -> None:
        try:
            self._doc(user_id).delete()
        except gcp_exceptions.GoogleAPICallError as e:
            raise StorageError(f"Failed to delete profile image for {user_id}") from e


# ---------------------------
# In-memory (local dev / tests)
# ---------------------------
class InMemoryProfileImageRepository:
    def __init__(self):
        self._records: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def find_by_user_id(self, user_id: str) -> Optional[ProfileImage]:
        with self._lock:
            data = self._records.get(user_id)
        if data is None:
            return None
        return ProfileImage(user_id=user_id, image_data=data)

    def save(self, image: ProfileImage) -> ProfileImage:
        with self._lock:
            self._records[image.user_id] = image.image_data
        return image

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._records.pop(user_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
