# file: PORTAL/media/compress.py

import io
import logging

from PIL import Image, ImageOps

from PORTAL.core.config import PROFILE_IMAGE_QUALITY, PROFILE_IMAGE_SIZE
from PORTAL.core.errors import InvalidImage

logger = logging.getLogger("media.compress")


def compress_to_profile(image_bytes: bytes) -> bytes:
    """
    Fit image to 120x120 (center crop, aspect preserved) and return JPEG bytes
    at quality 80.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.load()
            img = ImageOps.exif_transpose(img)
            img = img.convert("RGB")
            img = ImageOps.fit(img, PROFILE_IMAGE_SIZE, method=Image.LANCZOS)
            output = io.BytesIO()
            img.save(output, format="JPEG", quality=PROFILE_IMAGE_QUALITY, optimize=True)
            return output.getvalue()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
        logger.info("Image decode failed: %s", e)
        raise InvalidImage() from e
