# file: PORTAL/media/security.py

import filetype

from PORTAL.core.errors import InvalidImage, InvalidInput


def validate_upload(file_bytes: bytes, content_type: str) -> None:
    """
    Cheap checks run before any decoding:
    - payload must be non-empty
    - declared content type must be image/*
    - if filetype recognises the bytes, they must be an image kind
    """
    if not file_bytes or not content_type or not content_type.startswith("image/"):
        raise InvalidInput()

    kind = filetype.guess(file_bytes)
    if kind is not None and not kind.mime.startswith("image/"):
        raise InvalidImage()
