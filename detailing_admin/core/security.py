import hmac
import logging
from typing import Optional
from fastapi import Response
from passlib.context import CryptContext
from detailing_admin.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception:
        return False

def verify_admin_password(
    password: str,
    password_hash: Optional[str] = None,
    plain_password: Optional[str] = None,
) -> bool:
    """Check a login attempt against the configured admin credential.

    A configured hash wins over the plain password setting.
    """
    password_hash = password_hash if password_hash is not None else settings.ADMIN_PASSWORD_HASH
    plain_password = plain_password if plain_password is not None else settings.ADMIN_PASSWORD

    if password_hash:
        return verify_password(password, password_hash)
    if not plain_password:
        logger.error("Neither ADMIN_PASSWORD_HASH nor ADMIN_PASSWORD is set")
        return False
    return hmac.compare_digest(password.encode(), plain_password.encode())

def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.SESSION_MAX_AGE,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )

def clear_session_cookie(response: Response) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        "",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )
