from fastapi import APIRouter, Depends, HTTPException, Query

from detailing_admin.core.enums import BookingStatus
from detailing_admin.core.sessions import require_admin_session
from detailing_admin.schemas.booking import BookingsOut, RevenueSummary
from detailing_admin.services.bookings import BookingSource, get_booking_source
from detailing_admin.services.expenses import ExpenseSource, get_expense_source
from detailing_admin.services.revenue import (
    is_completed_booking_status,
    normalize_booking_status,
    resolve_booking_revenue,
    summarize_revenue,
)

router = APIRouter(prefix="/api", tags=["bookings"], dependencies=[Depends(require_admin_session)])

VALID_BOOKING_STATUSES = {s.value for s in BookingStatus}


@router.get("/get-bookings", response_model=BookingsOut)
async def get_bookings(source: BookingSource = Depends(get_booking_source)):
    bookings = await source.list_bookings()
    for booking in bookings:
        booking["revenue"] = resolve_booking_revenue(booking)
        booking["completed"] = is_completed_booking_status(booking.get("status"))
    return BookingsOut(bookings=bookings)


@router.patch("/update-booking-status")
async def update_booking_status(
    id: str = Query(...),
    status: str = Query(...),
    source: BookingSource = Depends(get_booking_source)
):
    normalized = normalize_booking_status(status)
    if normalized not in VALID_BOOKING_STATUSES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid status value. Status must be one of: {', '.join(sorted(VALID_BOOKING_STATUSES))}"
        )

    if not await source.update_status(id, normalized):
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"success": True}


@router.delete("/delete-booking")
async def delete_booking(
    id: str = Query(...),
    source: BookingSource = Depends(get_booking_source)
):
    if not await source.delete_booking(id):
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"success": True}


@router.get("/admin/revenue", response_model=RevenueSummary)
async def revenue_summary(
    source: BookingSource = Depends(get_booking_source),
    expense_source: ExpenseSource = Depends(get_expense_source)
):
    return summarize_revenue(await source.list_bookings(), await expense_source.list_expenses())
