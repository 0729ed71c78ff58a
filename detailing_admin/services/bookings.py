"""Access to the bookings collection.

The production store is a managed document database reached through its own
driver; handlers only rely on the ``BookingSource`` contract below.
"""
import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class BookingSource(Protocol):
    async def list_bookings(self) -> List[Dict[str, Any]]:
        ...

    async def update_status(self, booking_id: str, status: str) -> bool:
        ...

    async def delete_booking(self, booking_id: str) -> bool:
        ...


def booking_id_of(booking: Dict[str, Any]) -> Optional[str]:
    value = booking.get("_id", booking.get("id"))
    return str(value) if value is not None else None


class InMemoryBookingSource:
    def __init__(self, bookings: Optional[Iterable[Dict[str, Any]]] = None):
        self._bookings: List[Dict[str, Any]] = [copy.deepcopy(b) for b in bookings or []]

    async def list_bookings(self) -> List[Dict[str, Any]]:
        # newest first, like the dashboard listing
        return sorted(
            (copy.deepcopy(b) for b in self._bookings),
            key=lambda b: (str(b.get("date") or ""), str(b.get("time") or "")),
            reverse=True,
        )

    def _find(self, booking_id: str) -> Optional[Dict[str, Any]]:
        for booking in self._bookings:
            if booking_id_of(booking) == booking_id:
                return booking
        return None

    async def update_status(self, booking_id: str, status: str) -> bool:
        booking = self._find(booking_id)
        if booking is None:
            return False
        booking["status"] = status
        logger.info(f"Booking {booking_id} status set to {status}")
        return True

    async def delete_booking(self, booking_id: str) -> bool:
        booking = self._find(booking_id)
        if booking is None:
            return False
        self._bookings.remove(booking)
        logger.info(f"Booking {booking_id} deleted")
        return True


_default_source = InMemoryBookingSource()


def get_booking_source() -> BookingSource:
    return _default_source
