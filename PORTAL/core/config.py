# file: PORTAL/core/config.py
import os
import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("core.config")

# ==============================
# Origin policy
# ==============================
# Paths that ALWAYS require a matching Origin header
STRICT_PROTECTED_PATHS = (
    "/api/auth/login",
    "/api/auth/register",
)

# Paths that only validate Origin when the header is present
PROTECTED_PATHS = (
    "/api/user",
    "/api/auth/logout",
    "/api/demo",
)

# ==============================
# Profile images
# ==============================
PROFILE_IMAGE_SIZE = (120, 120)
PROFILE_IMAGE_QUALITY = 80  # JPEG quality factor 0.8
PROFILE_IMAGE_COLLECTION = "PROFILE_IMAGES"


class AppConfig(BaseModel):
    """
    Startup configuration. Built once and passed into the components
    that need it; nothing reads it back from module globals.
    """
    model_config = ConfigDict(frozen=True)

    allowed_origin: str = Field(..., min_length=1)
    secret_key: str = Field(..., min_length=1)
    jwt_algorithm: str = "HS256"

    profile_image_backend: str = Field("firestore", pattern=r"^(firestore|memory)$")
    firebase_project_id: Optional[str] = None
    credential_source: Optional[str] = None

    max_upload_mb: int = Field(5, ge=1)
    upload_rate_limit: str = "20/minute"
    rate_limit_enabled: bool = True

    cloud_logging: bool = False
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> AppConfig:
    """
    Read settings from the environment. ALLOWED_ORIGIN and SECRET_KEY have
    no fallback: the process refuses to start without them.
    """
    allowed_origin = os.getenv("ALLOWED_ORIGIN")
    if not allowed_origin:
        raise RuntimeError("ALLOWED_ORIGIN env var is not set")

    secret_key = os.getenv("SECRET_KEY")
    if not secret_key:
        raise RuntimeError("SECRET_KEY env var is not set")

    config = AppConfig(
        allowed_origin=allowed_origin,
        secret_key=secret_key,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        profile_image_backend=os.getenv("PROFILE_IMAGE_BACKEND", "firestore"),
        firebase_project_id=os.getenv("FIREBASE_PROJECT_ID"),
        credential_source=os.getenv("GOOGLE_APPLICATION_CREDENTIALS"),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "5")),
        upload_rate_limit=os.getenv("UPLOAD_RATE_LIMIT", "20/minute"),
        rate_limit_enabled=_env_flag("RATE_LIMIT_ENABLED", "true"),
        cloud_logging=_env_flag("CLOUD_LOGGING", "false"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
    logger.info(
        "Loaded config: allowed_origin=%s backend=%s max_upload_mb=%d",
        config.allowed_origin, config.profile_image_backend, config.max_upload_mb,
    )
    return config
