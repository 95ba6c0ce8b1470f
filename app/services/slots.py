"""
Slot repository: appointment slots advertised by artists.

Owns the per-artist calendar rules: slots start in the future, have a
bounded positive duration, never overlap another slot of the same artist,
and can only be removed while no active booking holds them.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import exists
from sqlalchemy.orm import Query, Session, joinedload

from app.core import errors
from app.core.config import Settings
from app.db.unit_of_work import unit_of_work
from app.models.appointment_slot import AppointmentSlot
from app.models.artist import Artist
from app.models.booking import ACTIVE_STATUS_IDS, Booking
from app.schemas.appointment_slot import DaySlotDefinition
from app.utils.timeslots import (
    day_bounds,
    intervals_overlap,
    local_datetime,
    parse_clock,
    to_storage,
    utcnow,
)

logger = logging.getLogger(__name__)


class SlotRepository:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_artist(self, user_id: int, message: str) -> Artist:
        """Load the caller's artist profile, locking it to serialise calendar writes."""
        artist = (
            self.db.query(Artist)
            .filter(Artist.user_id == user_id)
            .with_for_update()
            .first()
        )
        if not artist:
            raise errors.Forbidden(message)
        return artist

    def _validate_window(self, start: datetime, duration) -> int:
        try:
            duration = int(duration)
        except (TypeError, ValueError):
            raise errors.ValidationError("Duration must be a positive number")
        if duration <= 0:
            raise errors.ValidationError("Duration must be a positive number")
        if duration > self.settings.MAX_SLOT_DURATION_MINUTES:
            raise errors.ValidationError(
                f"Duration cannot exceed {self.settings.MAX_SLOT_DURATION_MINUTES} minutes"
            )
        if start <= utcnow():
            raise errors.ValidationError("Appointment date must be in the future")
        return duration

    def _find_overlap(
        self, artist_id: int, start: datetime, duration: int
    ) -> Optional[AppointmentSlot]:
        """Return an existing slot of the artist whose window overlaps [start, start+duration)."""
        # Any overlapping slot starts within MAX_SLOT_DURATION_MINUTES before `start`
        earliest = start - timedelta(minutes=self.settings.MAX_SLOT_DURATION_MINUTES)
        latest = start + timedelta(minutes=duration)
        candidates = (
            self.db.query(AppointmentSlot)
            .filter(
                AppointmentSlot.artist_id == artist_id,
                AppointmentSlot.date_time > earliest,
                AppointmentSlot.date_time < latest,
            )
            .order_by(AppointmentSlot.date_time)
            .all()
        )
        for slot in candidates:
            if intervals_overlap(slot.date_time, slot.duration, start, duration):
                return slot
        return None

    def _insert_slot(self, artist: Artist, start: datetime, duration: int) -> AppointmentSlot:
        conflict = self._find_overlap(artist.artist_id, start, duration)
        if conflict:
            logger.warning(
                "Slot for artist %s at %s overlaps slot %s.",
                artist.artist_id, start, conflict.slot_id,
            )
            raise errors.Conflict("This time slot overlaps with an existing appointment")
        slot = AppointmentSlot(
            artist_id=artist.artist_id,
            date_time=start,
            duration=duration,
            is_booked=False,
        )
        self.db.add(slot)
        self.db.flush()
        return slot

    def _has_active_booking(self, slot_id: int) -> bool:
        return self.db.query(
            exists().where(
                Booking.slot_id == slot_id,
                Booking.status_id.in_(ACTIVE_STATUS_IDS),
            )
        ).scalar()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_slot(self, user_id: int, date_time: datetime, duration) -> AppointmentSlot:
        start = to_storage(date_time)
        with unit_of_work(self.db):
            artist = self._lock_artist(user_id, "Only artists can create appointment slots")
            duration = self._validate_window(start, duration)
            slot = self._insert_slot(artist, start, duration)
        logger.info("Artist %s created slot %s at %s.", artist.artist_id, slot.slot_id, start)
        self.db.refresh(slot)
        return slot

    def create_slots_for_day(
        self, user_id: int, day: date, definitions: Sequence[DaySlotDefinition]
    ) -> List[AppointmentSlot]:
        """Create several slots on one calendar day; all or none are stored."""
        created: List[AppointmentSlot] = []
        with unit_of_work(self.db):
            artist = self._lock_artist(user_id, "Only artists can create appointment slots")
            for definition in definitions:
                try:
                    at = parse_clock(definition.time)
                except ValueError:
                    raise errors.ValidationError(f"Invalid time '{definition.time}'")
                start = local_datetime(day, at, self.settings.CALENDAR_TIMEZONE)
                duration = self._validate_window(start, definition.duration)
                # Earlier slots of this request are flushed, so they count as overlaps too
                created.append(self._insert_slot(artist, start, duration))
        logger.info("Artist %s created %d slot(s) on %s.", artist.artist_id, len(created), day)
        for slot in created:
            self.db.refresh(slot)
        return created

    def delete_slot(self, slot_id: int, user_id: int) -> None:
        with unit_of_work(self.db):
            slot = (
                self.db.query(AppointmentSlot)
                .filter(AppointmentSlot.slot_id == slot_id)
                .with_for_update()
                .first()
            )
            if not slot:
                raise errors.NotFound("Appointment slot not found")
            artist = self.db.get(Artist, slot.artist_id)
            if artist.user_id != user_id:
                raise errors.Forbidden("You are not authorized to delete this appointment slot")
            if slot.is_booked or self._has_active_booking(slot_id):
                raise errors.Conflict("Cannot delete a booked appointment slot")
            artist_id = artist.artist_id
            # Declined/cancelled bookings keep their appointment snapshot;
            # the ORM nulls their slot_id on delete
            self.db.delete(slot)
        logger.info("Artist %s deleted slot %s.", artist_id, slot_id)

    def list_available(self, artist_id: int, day: date) -> Iterable[AppointmentSlot]:
        """
        Slots of ``artist_id`` on ``day`` with no active booking, earliest first.

        Returns the query itself: it is evaluated lazily and can be iterated
        again to re-read the calendar.
        """
        start, end = day_bounds(day, self.settings.CALENDAR_TIMEZONE)
        has_active_booking = exists().where(
            Booking.slot_id == AppointmentSlot.slot_id,
            Booking.status_id.in_(ACTIVE_STATUS_IDS),
        )
        query: Query = (
            self.db.query(AppointmentSlot)
            .filter(
                AppointmentSlot.artist_id == artist_id,
                AppointmentSlot.date_time >= start,
                AppointmentSlot.date_time <= end,
                ~has_active_booking,
            )
            .order_by(AppointmentSlot.date_time.asc())
        )
        return query

    def list_artist_slots(self, user_id: int) -> List[Tuple[AppointmentSlot, Optional[Booking]]]:
        """Future slots of the caller's artist profile with the active booking on each."""
        artist = self.db.query(Artist).filter(Artist.user_id == user_id).first()
        if not artist:
            raise errors.Forbidden("Only artists can access their appointment slots")

        slots = (
            self.db.query(AppointmentSlot)
            .options(joinedload(AppointmentSlot.bookings).joinedload(Booking.client))
            .filter(
                AppointmentSlot.artist_id == artist.artist_id,
                AppointmentSlot.date_time >= utcnow(),
            )
            .order_by(AppointmentSlot.date_time.asc())
            .all()
        )
        result = []
        for slot in slots:
            active = next((b for b in slot.bookings if b.status.is_active), None)
            result.append((slot, active))
        return result
