# file: PORTAL/USERS/profile_image.py
import base64
import logging
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

from PORTAL.media.compress import compress_to_profile
from PORTAL.media.security import validate_upload
from PORTAL.USERS.repository import ProfileImage, ProfileImageRepository

logger = logging.getLogger("users.profile_image")


class ProfileImageService:
    """
    Keeps exactly one compressed 120x120 JPEG per user.

    Writes for the same user id are serialized so the lookup-then-write
    upsert cannot interleave. Reads take no lock.
    """

    def __init__(self, repository: ProfileImageRepository):
        self.repository = repository
        # user_id -> [lock, holders]; an entry lives only while someone holds or waits on it
        self._locks: Dict[str, List] = {}
        self._locks_guard = threading.Lock()

    @contextmanager
    def _user_lock(self, user_id: str):
        with self._locks_guard:
            entry = self._locks.get(user_id)
            if entry is None:
                entry = self._locks[user_id] = [threading.Lock(), 0]
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[user_id]

    def save(self, user_id: str, file_bytes: bytes, content_type: Optional[str]) -> ProfileImage:
        validate_upload(file_bytes, content_type)
        compressed = compress_to_profile(file_bytes)

        with self._user_lock(user_id):
            existing = self.repository.find_by_user_id(user_id)
            if existing is not None:
                existing.image_data = compressed
                record = existing
            else:
                record = ProfileImage(user_id=user_id, image_data=compressed)
            saved = self.repository.save(record)

        logger.info(
            "%s profile image for user_id=%s (%d bytes)",
            "Replaced" if existing is not None else "Stored", user_id, len(compressed),
        )
        return saved

    def get_encoded(self, user_id: str) -> Optional[str]:
        record = self.repository.find_by_user_id(user_id)
        if record is None:
            return None
        return encode_image(record.image_data)

    def delete(self, user_id: str) -> bool:
        with self._user_lock(user_id):
            if self.repository.find_by_user_id(user_id) is None:
                return False
            self.repository.delete(user_id)
        logger.info("Deleted profile image for user_id=%s", user_id)
        return True


def encode_image(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
