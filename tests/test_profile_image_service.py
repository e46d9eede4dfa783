import base64
import io
import threading
from unittest import mock

import pytest
from PIL import Image

from helpers import make_image
from PORTAL.core.errors import InvalidImage, InvalidInput, StorageError
from PORTAL.USERS.profile_image import ProfileImageService
from PORTAL.USERS.repository import InMemoryProfileImageRepository


@pytest.fixture
def service(repository):
    return ProfileImageService(repository)


def decode(encoded):
    return Image.open(io.BytesIO(base64.b64decode(encoded)))


def test_save_then_get_encoded_returns_120_square_jpeg(service, png_bytes):
    service.save("u1", png_bytes, "image/png")

    encoded = service.get_encoded("u1")
    assert "\n" not in encoded
    img = decode(encoded)
    assert img.size == (120, 120)
    assert img.format == "JPEG"


@pytest.mark.parametrize("size", [(40, 40), (1000, 300), (120, 120)])
def test_any_input_size_is_fit_to_120(service, size):
    saved = service.save("u1", make_image(size=size), "image/png")
    assert Image.open(io.BytesIO(saved.image_data)).size == (120, 120)


def test_repeated_saves_update_single_record(service, repository):
    service.save("u1", make_image(color=(255, 0, 0)), "image/png")
    first = service.get_encoded("u1")
    service.save("u1", make_image(color=(0, 0, 255), fmt="JPEG"), "image/jpeg")
    service.save("u1", make_image(color=(0, 255, 0), fmt="GIF"), "image/gif")

    assert len(repository) == 1
    assert service.get_encoded("u1") != first


def test_records_are_per_user(service, repository, png_bytes):
    service.save("u1", png_bytes, "image/png")
    service.save("u2", png_bytes, "image/png")
    assert len(repository) == 2


def test_get_encoded_without_record_is_none(service):
    assert service.get_encoded("nobody") is None


def test_delete_removes_record(service, png_bytes):
    service.save("u1", png_bytes, "image/png")
    assert service.delete("u1") is True
    assert service.get_encoded("u1") is None


def test_delete_without_record_is_noop(service):
    assert service.delete("nobody") is False
    assert service.get_encoded("nobody") is None


@pytest.mark.parametrize("payload, content_type", [
    (b"", "image/png"),
    (make_image(), "application/pdf"),
    (make_image(), "text/plain"),
    (make_image(), None),
    (make_image(), ""),
])
def test_invalid_input_is_rejected_before_decoding(service, payload, content_type):
    with mock.patch("PORTAL.USERS.profile_image.compress_to_profile") as compress:
        with pytest.raises(InvalidInput) as exc:
            service.save("u1", payload, content_type)
    compress.assert_not_called()
    assert exc.value.message == "Only image files are allowed"


def test_spoofed_non_image_is_invalid_image(service):
    # a real zip archive declared as an image
    zip_bytes = b"PK\x03\x04" + b"\x00" * 60
    with pytest.raises(InvalidImage):
        service.save("u1", zip_bytes, "image/png")


def test_garbage_bytes_are_invalid_image(service):
    with pytest.raises(InvalidImage) as exc:
        service.save("u1", b"definitely not an image", "image/jpeg")
    assert exc.value.message == "Invalid image file"


def test_truncated_image_is_invalid_image(service, png_bytes):
    with pytest.raises(InvalidImage):
        service.save("u1", png_bytes[:40], "image/png")


def test_failed_save_leaves_existing_record(service, png_bytes):
    service.save("u1", png_bytes, "image/png")
    before = service.get_encoded("u1")
    with pytest.raises(InvalidImage):
        service.save("u1", b"garbage", "image/png")
    assert service.get_encoded("u1") == before


def test_storage_errors_propagate(png_bytes):
    repo = mock.Mock()
    repo.find_by_user_id.side_effect = StorageError("backend down")
    service = ProfileImageService(repo)

    with pytest.raises(StorageError):
        service.save("u1", png_bytes, "image/png")
    with pytest.raises(StorageError):
        service.get_encoded("u1")


def test_concurrent_saves_keep_one_record(png_bytes):
    repo = InMemoryProfileImageRepository()
    service = ProfileImageService(repo)
    errors = []

    def upload():
        try:
            service.save("same-user", png_bytes, "image/png")
        except Exception as e:  # collected for the assertion below
            errors.append(e)

    threads = [threading.Thread(target=upload) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(repo) == 1


def test_upsert_is_serialized_per_user(png_bytes):
    """find and save for one user never interleave with another save."""
    events = []
    inner = InMemoryProfileImageRepository()

    class Recording:
        def find_by_user_id(self, user_id):
            events.append("find")
            return inner.find_by_user_id(user_id)

        def save(self, image):
            events.append("save")
            return inner.save(image)

        def delete(self, user_id):
            inner.delete(user_id)

    service = ProfileImageService(Recording())
    threads = [
        threading.Thread(target=service.save, args=("u1", png_bytes, "image/png"))
        for _ in range(5)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert events == ["find", "save"] * 5


def test_lock_registry_is_emptied_after_use(service, png_bytes):
    for i in range(50):
        service.save(f"user-{i}", png_bytes, "image/png")
        service.delete(f"user-{i}")
    for i in range(1000):
        service.delete(f"unknown-{i}")
    with pytest.raises(InvalidImage):
        service.save("broken", b"garbage", "image/png")

    assert len(service._locks) == 0


def test_lock_registry_is_emptied_after_storage_failure(png_bytes):
    repo = mock.Mock()
    repo.find_by_user_id.side_effect = StorageError("backend down")
    service = ProfileImageService(repo)

    with pytest.raises(StorageError):
        service.delete("u1")
    assert len(service._locks) == 0


def test_lock_registry_is_emptied_after_concurrent_saves(service, png_bytes):
    threads = [
        threading.Thread(target=service.save, args=("u1", png_bytes, "image/png"))
        for _ in range(8)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(service._locks) == 0


def test_resource_errors_are_not_reported_as_invalid_image(service, png_bytes):
    with mock.patch("PORTAL.media.compress.Image.open", side_effect=MemoryError()):
        with pytest.raises(MemoryError):
            service.save("u1", png_bytes, "image/png")
