from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_booking_service, get_current_user
from app.core.security import Identity
from app.models.booking import BookingStatus
from app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingPriceUpdate,
    BookingResponse,
    BookingStatusUpdate,
    QuoteAction,
)
from app.services.bookings import BookingService
from app.utils.serializers import serialize_booking

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Request a booking on a free slot.

    The booking starts as Pending and the slot is marked booked in the same
    transaction. A slot that is already booked returns 409.
    """
    booking = bookings.create(current_user.user_id, data)
    return BookingResponse(message="Booking created successfully", booking=serialize_booking(booking))


# Static paths are declared before /{booking_id}


@router.get("/artist", response_model=BookingListResponse)
def list_artist_bookings(
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """Every booking of the calling artist, newest first, with client contact details."""
    result = bookings.list_for_artist(current_user.user_id)
    return BookingListResponse(
        bookings=[serialize_booking(b, include_client=True) for b in result]
    )


@router.get("/mine", response_model=BookingListResponse)
def list_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    result = bookings.list_for_client(current_user.user_id, status_filter)
    return BookingListResponse(
        bookings=[serialize_booking(b, include_review=True) for b in result]
    )


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    booking = bookings.get(booking_id, current_user.user_id)
    return BookingResponse(
        booking=serialize_booking(
            booking, include_contacts=True, include_client=True, include_review=True
        )
    )


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/price", response_model=BookingResponse)
def set_booking_price(
    booking_id: int,
    data: BookingPriceUpdate,
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """Artist quotes a price. Allowed once, while the booking is Pending."""
    booking = bookings.set_price(booking_id, current_user.user_id, data.price)
    return BookingResponse(message="Price set successfully", booking=serialize_booking(booking))


@router.patch("/{booking_id}/status", response_model=BookingResponse)
def respond_to_quote(
    booking_id: int,
    data: BookingStatusUpdate,
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    """Client confirms or declines the quoted price. Declining frees the slot."""
    booking = bookings.respond_to_quote(booking_id, current_user.user_id, data.action)
    verb = "confirmed" if data.action == QuoteAction.CONFIRM else "declined"
    return BookingResponse(message=f"Booking {verb} successfully", booking=serialize_booking(booking))


@router.patch("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: int,
    current_user: Identity = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    booking = bookings.cancel(booking_id, current_user.user_id)
    return BookingResponse(message="Booking cancelled successfully", booking=serialize_booking(booking))
