"""
utils/sanitize.py

Strips HTML from user-supplied text before it is stored or echoed back.
"""

import bleach
from pydantic import BaseModel, field_validator

ALLOWED_TAGS = []
ALLOWED_ATTRIBUTES = {}


def sanitize_text(user_input: str, max_length: int = 500) -> str:
    """
    Clean user input to prevent XSS and enforce length limits.
    """
    if not user_input:
        return ""

    trimmed = user_input[:max_length]

    cleaned = bleach.clean(
        trimmed,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    return cleaned.strip()


class SanitizedModel(BaseModel):
    """
    Base model that sanitizes every incoming string field.
    """

    @field_validator("*", mode="before")
    @classmethod
    def sanitize_all_strings(cls, v):
        if isinstance(v, str):
            return sanitize_text(v, max_length=1000)
        return v
