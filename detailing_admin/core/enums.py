from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def __str__(self):
        return self.value


class RouteKind(str, Enum):
    ADMIN_PAGE = "admin_page"
    ADMIN_API = "admin_api"
    PUBLIC = "public"

    def __str__(self):
        return self.value


class GuardDecision(str, Enum):
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    UNAUTHORIZED = "unauthorized"

    def __str__(self):
        return self.value
