from datetime import date

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_current_user, get_slot_repository
from app.core.security import Identity
from app.schemas.appointment_slot import (
    ArtistSlot,
    ArtistSlotListResponse,
    AvailableSlot,
    AvailableSlotListResponse,
    DaySlotsCreate,
    SlotBookingSummary,
    SlotCreate,
    SlotListResponse,
    SlotResponse,
)
from app.schemas.common import ApiResponse, PersonName
from app.services.slots import SlotRepository
from app.utils.serializers import serialize_slot

router = APIRouter(prefix="/appointments", tags=["Appointments"])


# ---------------------------------------------------------------------------
# Artist calendar
# ---------------------------------------------------------------------------


@router.post("", response_model=SlotResponse, status_code=status.HTTP_201_CREATED)
def create_slot(
    data: SlotCreate,
    current_user: Identity = Depends(get_current_user),
    slots: SlotRepository = Depends(get_slot_repository),
):
    """Advertise one appointment slot. It must start in the future and not overlap another slot."""
    slot = slots.create_slot(current_user.user_id, data.date_time, data.duration)
    return SlotResponse(message="Appointment slot created successfully", slot=serialize_slot(slot))


@router.post("/slots", response_model=SlotListResponse, status_code=status.HTTP_201_CREATED)
def create_slots_for_day(
    data: DaySlotsCreate,
    current_user: Identity = Depends(get_current_user),
    slots: SlotRepository = Depends(get_slot_repository),
):
    """
    Create several slots on one calendar day.

    Times are "HH:MM" in the calendar timezone. Either every slot is created
    or none is.
    """
    created = slots.create_slots_for_day(current_user.user_id, data.date, data.slots)
    return SlotListResponse(
        message=f"{len(created)} appointment slot(s) created successfully",
        slots=[serialize_slot(s) for s in created],
    )


@router.delete("/{slot_id}", response_model=ApiResponse)
def delete_slot(
    slot_id: int,
    current_user: Identity = Depends(get_current_user),
    slots: SlotRepository = Depends(get_slot_repository),
):
    slots.delete_slot(slot_id, current_user.user_id)
    return ApiResponse(message="Appointment slot deleted successfully")


@router.get("/artist", response_model=ArtistSlotListResponse)
def list_artist_slots(
    current_user: Identity = Depends(get_current_user),
    slots: SlotRepository = Depends(get_slot_repository),
):
    """Upcoming slots of the calling artist with the booking holding each one."""
    result = []
    for slot, booking in slots.list_artist_slots(current_user.user_id):
        summary = None
        if booking is not None:
            summary = SlotBookingSummary(
                booking_id=booking.booking_id,
                client=PersonName(
                    first_name=booking.client.first_name,
                    last_name=booking.client.last_name,
                ),
            )
        result.append(
            ArtistSlot(
                id=slot.slot_id,
                date_time=slot.date_time,
                duration=slot.duration,
                is_booked=slot.is_booked,
                booking=summary,
            )
        )
    return ArtistSlotListResponse(slots=result)


# ---------------------------------------------------------------------------
# Public availability
# ---------------------------------------------------------------------------


@router.get("/available", response_model=AvailableSlotListResponse)
def list_available_slots(
    artist_id: int = Query(..., alias="artistId", ge=1),
    day: date = Query(..., alias="date"),
    slots: SlotRepository = Depends(get_slot_repository),
):
    """Free slots of an artist on a calendar day, earliest first. No authentication required."""
    return AvailableSlotListResponse(
        slots=[
            AvailableSlot(slot_id=s.slot_id, date_time=s.date_time, duration=s.duration)
            for s in slots.list_available(artist_id, day)
        ]
    )
