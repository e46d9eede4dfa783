"""
Shared fixtures: an app wired to the in-memory image store, auth headers,
and a generated test image.
"""

import pytest
from fastapi.testclient import TestClient

from helpers import ALLOWED_ORIGIN, SECRET, make_image, make_token
from PORTAL.app import create_app
from PORTAL.core.config import AppConfig
from PORTAL.routers.demo import reset_message
from PORTAL.USERS.repository import InMemoryProfileImageRepository


@pytest.fixture
def config():
    return AppConfig(
        allowed_origin=ALLOWED_ORIGIN,
        secret_key=SECRET,
        profile_image_backend="memory",
        max_upload_mb=1,
        rate_limit_enabled=False,
    )


@pytest.fixture
def repository():
    return InMemoryProfileImageRepository()


@pytest.fixture
def app(config, repository):
    reset_message()
    return create_app(config, repository=repository)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers():
    token = make_token("42", email="ada@example.com", name="Ada")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def png_bytes():
    return make_image()
