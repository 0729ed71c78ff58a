"""Request-time admin route protection.

The guard only checks that a session cookie is present. Whether the session
behind it is still valid is decided later by the route handlers.
"""
from pydantic import BaseModel, ConfigDict

from detailing_admin.core.enums import GuardDecision, RouteKind

LOGIN_PATH = "/admin"
AUTH_API_PREFIX = "/api/auth/"

ADMIN_PAGE_PREFIX = "/admin/"
ADMIN_PAGES = frozenset({"/adminDashboard", "/admin-services"})

ADMIN_API_PREFIXES = ("/api/admin/", "/api/update-booking/", "/api/analytics-")
ADMIN_API_ROUTES = frozenset({
    "/api/admin",
    "/api/get-bookings",
    "/api/update-booking",
    "/api/delete-booking",
    "/api/expenses",
    "/api/update-booking-status",
})
# routes that are public for reads and admin-only for the listed methods
METHOD_GATED_API_ROUTES = {
    "/api/services": frozenset({"PUT"}),
}


class GuardRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    method: str = "GET"
    has_token: bool = False


def _normalize_path(path: str) -> str:
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


def is_login_or_auth_path(path: str) -> bool:
    return path == LOGIN_PATH or (path + "/").startswith(AUTH_API_PREFIX)


def classify_route(path: str, method: str = "GET") -> RouteKind:
    path = _normalize_path(path)
    method = method.upper()

    if path.startswith(ADMIN_PAGE_PREFIX) or path in ADMIN_PAGES:
        return RouteKind.ADMIN_PAGE

    if path in ADMIN_API_ROUTES or path.startswith(ADMIN_API_PREFIXES):
        return RouteKind.ADMIN_API
    if method in METHOD_GATED_API_ROUTES.get(path, ()):
        return RouteKind.ADMIN_API

    return RouteKind.PUBLIC


def decide(request: GuardRequest) -> GuardDecision:
    path = _normalize_path(request.path)
    if is_login_or_auth_path(path):
        return GuardDecision.ALLOW

    kind = classify_route(path, request.method)
    if kind == RouteKind.PUBLIC or request.has_token:
        return GuardDecision.ALLOW

    if kind == RouteKind.ADMIN_PAGE:
        return GuardDecision.REDIRECT_TO_LOGIN
    return GuardDecision.UNAUTHORIZED
