import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, RedirectResponse

from detailing_admin.core.config import settings
from detailing_admin.core.enums import GuardDecision
from detailing_admin.core.guard import LOGIN_PATH, GuardRequest, classify_route, decide
from detailing_admin.core.metrics import guard_decisions

logger = logging.getLogger(__name__)


class AdminGuardMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        guard_request = GuardRequest(
            path=path,
            method=request.method,
            has_token=bool(request.cookies.get(settings.SESSION_COOKIE_NAME)),
        )
        decision = decide(guard_request)
        guard_decisions.labels(
            decision=decision.value,
            kind=classify_route(path, request.method).value
        ).inc()

        if decision == GuardDecision.REDIRECT_TO_LOGIN:
            logger.info(f"No admin session for page {path}, redirecting to login")
            return RedirectResponse(url=LOGIN_PATH, status_code=307)

        if decision == GuardDecision.UNAUTHORIZED:
            logger.info(f"No admin session for {request.method} {path}, rejecting")
            return JSONResponse(
                {"error": "Unauthorized. Please login."},
                status_code=401
            )

        return await call_next(request)
