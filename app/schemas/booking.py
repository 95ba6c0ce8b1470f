
import enum
from typing import Optional, List
from pydantic import Field
from decimal import Decimal

from app.schemas.common import ApiResponse, CamelModel, UTCDateTime


class QuoteAction(str, enum.Enum):
    CONFIRM = "confirm"
    DECLINE = "decline"


# Booking — Create (POST /bookings)
class BookingCreate(CamelModel):
    slot_id: int
    size_id: int
    placement_id: int
    is_color: bool = False
    reference_url: Optional[str] = Field(None, alias="referenceURL")
    comment: Optional[str] = None


# Booking — Quote (PATCH /bookings/{id}/price); positivity is checked after ownership
class BookingPriceUpdate(CamelModel):
    price: Optional[Decimal] = None


# Booking — Client response to a quote (PATCH /bookings/{id}/status)
class BookingStatusUpdate(CamelModel):
    action: QuoteAction


# Nested response objects for booking responses
class BookingDetails(CamelModel):
    size: str
    placement: str
    is_color: bool
    reference_url: Optional[str] = Field(None, alias="referenceURL")
    comment: Optional[str] = None
    price: Optional[Decimal] = None
    commission_amount: Optional[Decimal] = None


class BookingAppointment(CamelModel):
    slot_id: Optional[int] = None
    date_time: UTCDateTime
    duration: int


class BookingArtist(CamelModel):
    artist_id: int
    first_name: str
    last_name: str
    image_url: Optional[str] = Field(None, alias="imageURL")
    email: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    street_address: Optional[str] = None


class BookingClient(CamelModel):
    user_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None


class BookingReview(CamelModel):
    review_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[UTCDateTime] = None


# Booking — Full response
class Booking(CamelModel):
    id: int
    created_at: Optional[UTCDateTime] = None
    status: str
    status_id: int
    details: BookingDetails
    appointment: BookingAppointment
    artist: BookingArtist
    client: Optional[BookingClient] = None
    review: Optional[BookingReview] = None


class BookingResponse(ApiResponse):
    booking: Booking


class BookingListResponse(ApiResponse):
    bookings: List[Booking]
