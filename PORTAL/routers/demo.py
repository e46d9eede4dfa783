# file: PORTAL/routers/demo.py
import threading

from fastapi import APIRouter, Depends
from pydantic import constr

from PORTAL.core.security import AuthenticatedUser, get_current_user
from PORTAL.utils.sanitize import SanitizedModel

router = APIRouter(prefix="/api", tags=["demo"])

DEFAULT_MESSAGE = "Hello from the profile portal!"

_message = DEFAULT_MESSAGE
_message_lock = threading.Lock()


class MessageRequest(SanitizedModel):
    message: constr(min_length=1, max_length=500)


def reset_message() -> None:
    global _message
    with _message_lock:
        _message = DEFAULT_MESSAGE


@router.get("/demo")
async def get_demo_message():
    return {"message": _message}


@router.post("/demo")
async def post_demo_message(req: MessageRequest):
    global _message
    with _message_lock:
        _message = req.message
    return {"message": _message}


@router.get("/test")
async def protected_hello(user: AuthenticatedUser = Depends(get_current_user)):
    return {"message": "Hello from Protected endpoint", "user_id": user.user_id}
