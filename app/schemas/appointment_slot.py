
from typing import List, Optional
from pydantic import Field
from datetime import date, datetime

from app.schemas.common import ApiResponse, CamelModel, PersonName, UTCDateTime


# Slot — Create (POST /appointments)
class SlotCreate(CamelModel):
    date_time: datetime
    duration: int


# Bulk slot creation for one calendar day (POST /appointments/slots)
class DaySlotDefinition(CamelModel):
    time: str = Field(pattern=r"^\d{1,2}:\d{2}$")  # "HH:MM" in the calendar timezone
    duration: int


class DaySlotsCreate(CamelModel):
    date: date
    slots: List[DaySlotDefinition] = Field(min_length=1)


# Slot — owner-facing response
class Slot(CamelModel):
    id: int
    date_time: UTCDateTime
    duration: int
    is_booked: bool


# Public availability entry (GET /appointments/available)
class AvailableSlot(CamelModel):
    slot_id: int
    date_time: UTCDateTime
    duration: int


class SlotBookingSummary(CamelModel):
    booking_id: int
    client: PersonName


# Artist calendar entry (GET /appointments/artist)
class ArtistSlot(CamelModel):
    id: int
    date_time: UTCDateTime
    duration: int
    is_booked: bool
    booking: Optional[SlotBookingSummary] = None


class SlotResponse(ApiResponse):
    slot: Slot


class SlotListResponse(ApiResponse):
    slots: List[Slot]


class AvailableSlotListResponse(ApiResponse):
    slots: List[AvailableSlot]


class ArtistSlotListResponse(ApiResponse):
    slots: List[ArtistSlot]
