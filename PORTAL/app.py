# file: PORTAL/app.py
import logging
from typing import Optional

from fastapi import FastAPI, Request

from PORTAL.core.config import AppConfig
from PORTAL.core.middleware import OriginValidationMiddleware
from PORTAL.core.rate_limit import build_limiter
from PORTAL.routers.demo import router as demo_router
from PORTAL.USERS.profile_image import ProfileImageService
from PORTAL.USERS.repository import (
    FirestoreProfileImageRepository,
    InMemoryProfileImageRepository,
    ProfileImageRepository,
)
from PORTAL.USERS.user_routes import router as user_router

logger = logging.getLogger("app")


def build_repository(config: AppConfig) -> ProfileImageRepository:
    if config.profile_image_backend == "memory":
        logger.warning("Using in-memory profile image store; records are lost on restart")
        return InMemoryProfileImageRepository()

    from PORTAL.core.firebase import init_firestore

    return FirestoreProfileImageRepository(init_firestore(config))


def create_app(config: AppConfig, repository: Optional[ProfileImageRepository] = None) -> FastAPI:
    app = FastAPI(title="Profile Portal API")

    app.state.config = config
    app.state.profile_images = ProfileImageService(
        repository if repository is not None else build_repository(config)
    )

    # Rate limiter
    app.state.limiter = build_limiter(config)

    # Added last so it wraps everything: origin check runs before any route or auth
    app.add_middleware(OriginValidationMiddleware, config=config)

    # Routers
    app.include_router(user_router)
    app.include_router(demo_router)

    @app.get("/ping")
    async def ping(request: Request):
        return {"message": "pong"}

    return app
