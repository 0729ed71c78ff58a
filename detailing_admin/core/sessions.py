"""Opaque admin session tokens stored in Redis"""
import json
import logging
import secrets
import time
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from redis.asyncio import Redis

from detailing_admin.core.config import settings
from detailing_admin.core.redis import get_redis

logger = logging.getLogger(__name__)

SESSION_KEY_PREFIX = "session:"


def create_session_token() -> str:
    return secrets.token_hex(32)


def token_preview(token: Optional[str]) -> str:
    return f"{token[:10]}..." if token else "No token"


class SessionStore:
    def __init__(self, redis: Redis, max_age: Optional[int] = None):
        self.redis = redis
        self.max_age = max_age or settings.SESSION_MAX_AGE

    @staticmethod
    def _key(token: str) -> str:
        return f"{SESSION_KEY_PREFIX}{token}"

    async def create(self, data: Optional[dict] = None) -> str:
        token = create_session_token()
        now = int(time.time())
        record = {**(data or {}), "created_at": now, "expires_at": now + self.max_age}
        await self.redis.set(self._key(token), json.dumps(record), ex=self.max_age)
        logger.info(f"Session stored: {token_preview(token)}")
        return token

    async def verify(self, token: Optional[str]) -> bool:
        if not token:
            return False
        found = await self.redis.get(self._key(token)) is not None
        if not found:
            logger.info(f"Session not found or expired: {token_preview(token)}")
        return found

    async def delete(self, token: Optional[str]) -> None:
        if not token:
            return
        await self.redis.delete(self._key(token))
        logger.info(f"Session deleted: {token_preview(token)}")

    async def rotate(self, token: Optional[str]) -> Optional[str]:
        """Replace a valid session with a fresh one; None if it was invalid."""
        if not await self.verify(token):
            return None
        new_token = await self.create()
        await self.delete(token)
        return new_token


def get_session_store() -> SessionStore:
    return SessionStore(get_redis())


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


async def require_admin_session(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> str:
    token = get_session_token(request)
    if not await store.verify(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized. Please login."
        )
    return token
