import asyncio
import logging
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from detailing_admin.schemas.auth import LoginIn, AuthResult, AuthStatus
from detailing_admin.core.config import settings
from detailing_admin.core.metrics import login_attempts
from detailing_admin.core.security import verify_admin_password, set_session_cookie, clear_session_cookie
from detailing_admin.core.sessions import SessionStore, get_session_store, get_session_token

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=AuthResult)
async def login(
    payload: LoginIn,
    response: Response,
    store: SessionStore = Depends(get_session_store)
):
    if not payload.password or not payload.password.strip():
        raise HTTPException(status_code=400, detail="Password is required")

    is_valid = verify_admin_password(payload.password)
    logger.info(f"Admin login attempt: {'success' if is_valid else 'failure'}")
    login_attempts.labels(outcome="success" if is_valid else "failure").inc()

    if not is_valid:
        await asyncio.sleep(settings.LOGIN_FAILURE_DELAY)
        raise HTTPException(status_code=401, detail="Invalid password")

    token = await store.create({"role": "admin"})
    set_session_cookie(response, token)
    return AuthResult(message="Login successful")


@router.post("/logout", response_model=AuthResult)
async def logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store)
):
    await store.delete(get_session_token(request))
    clear_session_cookie(response)
    return AuthResult(message="Logout successful")


@router.get("/refresh", response_model=AuthResult)
async def refresh(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store)
):
    current_token = get_session_token(request)
    if not current_token:
        raise HTTPException(status_code=401, detail="No session found")

    new_token = await store.rotate(current_token)
    if new_token is None:
        raise HTTPException(status_code=401, detail="Invalid session")

    set_session_cookie(response, new_token)
    return AuthResult()


@router.get("/check", response_model=AuthStatus)
async def check(request: Request, store: SessionStore = Depends(get_session_store)):
    if await store.verify(get_session_token(request)):
        return AuthStatus(authenticated=True, message="Session is valid")
    return JSONResponse(
        status_code=401,
        content=AuthStatus(authenticated=False, message="Not authenticated").model_dump()
    )
