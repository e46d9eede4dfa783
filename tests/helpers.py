import io

from jose import jwt
from PIL import Image

ALLOWED_ORIGIN = "https://app.example.com"
SECRET = "test-secret-key-with-enough-length-000"


def make_token(user_id="42", **claims):
    payload = {"sub": user_id, **claims}
    return jwt.encode(payload, SECRET, algorithm="HS256")


def make_image(size=(300, 200), color=(200, 30, 30), fmt="PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format=fmt)
    return buf.getvalue()
