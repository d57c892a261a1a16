# content_api/core/security.py
import hashlib
import secrets
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, status
from loguru import logger

DEVICE_HEADER = "Access-UUID"
TOKEN_HEADER = "Access-Token"
LOGIN_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


# --- Password Functions ---
def make_salt(length: int = 6) -> str:
    return secrets.token_hex(length)[:length]


def get_password_hash(password: str, salt: str) -> str:
    """Stored password format: hex md5 of plaintext + salt."""
    return hashlib.md5(f"{password}{salt}".encode("utf-8")).hexdigest()


def verify_password(plain_password: str, salt: str, hashed_password: str) -> bool:
    return secrets.compare_digest(get_password_hash(plain_password, salt), hashed_password or "")


# --- Token Function ---
def create_session_token(user_id: Any, phone: str, login_ip: str, login_time: str) -> str:
    return hashlib.md5(f"{user_id}{phone}{login_ip}{login_time}".encode("utf-8")).hexdigest()


# --- Request helpers ---
def get_device_id(request: Request) -> str:
    """Device UUID sent by the client; empty string when missing."""
    return (request.headers.get(DEVICE_HEADER) or "").strip()


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


# --- Current Session Dependency ---
async def get_current_session(request: Request) -> Dict[str, Any]:
    """
    Session attached to the request by AuthMiddleware.
    Raises 401 if the middleware did not authenticate this request.
    """
    session: Optional[Dict[str, Any]] = getattr(request.state, "session", None)
    if not session:
        logger.warning(f"No authenticated session on request state for {request.url.path}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return session


async def get_current_user_id(session: Dict[str, Any] = Depends(get_current_session)) -> int:
    return int(session["id"])
