"""
Booking state machine.

A booking moves Requested -> Quoted -> Confirmed / Declined, and can be
cancelled by either party. Every transition reloads the booking under a row
lock, checks the caller and the transition table, then writes with a
guarded UPDATE so a concurrent change turns into a Conflict instead of a
lost update. Whenever the booking's activity changes, the slot's
``is_booked`` flag is written in the same transaction.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session, joinedload

from app.core import errors
from app.core.config import Settings
from app.db.unit_of_work import unit_of_work
from app.models.appointment_slot import AppointmentSlot
from app.models.artist import Artist
from app.models.booking import STATUS_IDS, Booking, BookingStatus
from app.models.lookup import Placement, Size
from app.schemas.booking import BookingCreate, QuoteAction
from app.utils.timeslots import utcnow

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
MAX_PRICE = Decimal("99999999.99")

TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.REQUESTED: frozenset({BookingStatus.QUOTED, BookingStatus.CANCELLED}),
    BookingStatus.QUOTED: frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.DECLINED, BookingStatus.CANCELLED}
    ),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED}),
    # The slot was already released on decline; only the label changes
    BookingStatus.DECLINED: frozenset({BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
}

QUOTE_OUTCOMES = {
    QuoteAction.CONFIRM: BookingStatus.CONFIRMED,
    QuoteAction.DECLINE: BookingStatus.DECLINED,
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in TRANSITIONS[current]


def commission_for(price: Decimal, rate: Decimal) -> Decimal:
    return (price * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


class BookingService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_booking(self, booking_id: int) -> Booking:
        booking = (
            self.db.query(Booking)
            .filter(Booking.booking_id == booking_id)
            .with_for_update()
            .first()
        )
        if not booking:
            raise errors.NotFound("Booking not found")
        return booking

    def _artist_user_id(self, booking: Booking) -> int:
        return self.db.get(Artist, booking.artist_id).user_id

    def _transition(self, booking: Booking, target: BookingStatus, **values) -> None:
        """Move ``booking`` to ``target``, guarded on the status it was loaded with."""
        current = booking.status
        if not can_transition(current, target):
            logger.warning(
                "Refused booking %s transition %s -> %s.",
                booking.booking_id, current.value, target.value,
            )
            raise errors.Conflict(
                f"Booking cannot move from {current.label} to {target.label}"
            )
        updated = (
            self.db.query(Booking)
            .filter(
                Booking.booking_id == booking.booking_id,
                Booking.status_id == STATUS_IDS[current],
            )
            .update({"status_id": STATUS_IDS[target], **values}, synchronize_session="fetch")
        )
        if updated != 1:
            raise errors.Conflict("Booking was modified by another request")
        logger.info("Booking %s: %s -> %s.", booking.booking_id, current.value, target.value)

    def _reserve_slot(self, slot_id: int) -> None:
        updated = (
            self.db.query(AppointmentSlot)
            .filter(
                AppointmentSlot.slot_id == slot_id,
                AppointmentSlot.is_booked == False,  # noqa: E712
            )
            .update({"is_booked": True}, synchronize_session="fetch")
        )
        if updated != 1:
            raise errors.Conflict("This appointment slot is already booked")

    def _release_slot(self, slot_id: Optional[int]) -> None:
        if slot_id is None:
            return
        self.db.query(AppointmentSlot).filter(
            AppointmentSlot.slot_id == slot_id
        ).update({"is_booked": False}, synchronize_session="fetch")

    def _load(self, booking_id: int) -> Booking:
        """Load a booking with everything the projections read."""
        booking = (
            self.db.query(Booking)
            .options(
                joinedload(Booking.artist).joinedload(Artist.user),
                joinedload(Booking.artist).joinedload(Artist.city),
                joinedload(Booking.client),
                joinedload(Booking.size),
                joinedload(Booking.placement),
                joinedload(Booking.review),
            )
            .filter(Booking.booking_id == booking_id)
            .first()
        )
        if not booking:
            raise errors.NotFound("Booking not found")
        return booking

    def _parse_price(self, price) -> Decimal:
        if price is None or isinstance(price, bool):
            raise errors.ValidationError("Valid price is required")
        try:
            value = Decimal(str(price))
        except (InvalidOperation, ValueError):
            raise errors.ValidationError("Valid price is required")
        if not value.is_finite() or value <= 0:
            raise errors.ValidationError("Valid price is required")
        value = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        if value <= 0 or value > MAX_PRICE:
            raise errors.ValidationError("Valid price is required")
        return value

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def create(self, user_id: int, data: BookingCreate) -> Booking:
        """Request a booking on a slot and mark the slot booked, atomically."""
        with unit_of_work(self.db, conflict_message="This appointment slot is already booked"):
            slot = (
                self.db.query(AppointmentSlot)
                .filter(AppointmentSlot.slot_id == data.slot_id)
                .with_for_update()
                .first()
            )
            if not slot:
                raise errors.NotFound("Appointment slot not found")
            if slot.is_booked:
                raise errors.Conflict("This appointment slot is already booked")

            artist = self.db.get(Artist, slot.artist_id)
            if artist.user_id == user_id:
                raise errors.ValidationError("You cannot book an appointment with yourself")
            if slot.date_time <= utcnow():
                raise errors.ValidationError("You can only book future appointment slots")
            if self.db.get(Size, data.size_id) is None or self.db.get(Placement, data.placement_id) is None:
                raise errors.ValidationError("Invalid size, placement, or slot ID provided")

            booking = Booking(
                user_id=user_id,
                artist_id=artist.artist_id,
                slot_id=slot.slot_id,
                status_id=STATUS_IDS[BookingStatus.REQUESTED],
                size_id=data.size_id,
                placement_id=data.placement_id,
                is_color=data.is_color,
                reference_url=data.reference_url,
                comment=data.comment,
                appointment_at=slot.date_time,
                duration=slot.duration,
                created_at=utcnow(),
            )
            self.db.add(booking)
            self.db.flush()
            self._reserve_slot(slot.slot_id)
            booking_id = booking.booking_id

        logger.info("User %s requested booking %s on slot %s.", user_id, booking_id, data.slot_id)
        return self._load(booking_id)

    def set_price(self, booking_id: int, user_id: int, price) -> Booking:
        """Artist quotes a price; commission is fixed at the same moment."""
        with unit_of_work(self.db):
            booking = self._lock_booking(booking_id)
            if self._artist_user_id(booking) != user_id:
                raise errors.Forbidden("Only the artist can set the price")
            amount = self._parse_price(price)
            if booking.price is not None:
                raise errors.ValidationError("Price is already set")
            commission = commission_for(amount, self.settings.COMMISSION_RATE)
            self._transition(
                booking,
                BookingStatus.QUOTED,
                price=amount,
                commission_amount=commission,
            )
        return self._load(booking_id)

    def respond_to_quote(self, booking_id: int, user_id: int, action: QuoteAction) -> Booking:
        """Client confirms or declines a quoted booking; decline frees the slot."""
        target = QUOTE_OUTCOMES[action]
        with unit_of_work(self.db):
            booking = self._lock_booking(booking_id)
            if booking.user_id != user_id:
                raise errors.Forbidden("Only the client can confirm or decline the booking")
            if booking.price is None:
                raise errors.ValidationError(
                    "Cannot confirm or decline a booking: price not set"
                )
            slot_id = booking.slot_id
            self._transition(booking, target)
            if target == BookingStatus.DECLINED:
                self._release_slot(slot_id)
        return self._load(booking_id)

    def cancel(self, booking_id: int, user_id: int) -> Booking:
        """
        Either party cancels.

        Active bookings free their slot. A declined booking is relabelled
        without touching the slot, which may already belong to another
        booking. Cancelling a cancelled booking changes nothing.
        """
        with unit_of_work(self.db):
            booking = self._lock_booking(booking_id)
            is_client = booking.user_id == user_id
            is_artist = self._artist_user_id(booking) == user_id
            if not is_client and not is_artist:
                raise errors.Forbidden("Only the client or artist can cancel the booking")

            current = booking.status
            if current == BookingStatus.CANCELLED:
                logger.info("Booking %s already cancelled.", booking_id)
            else:
                slot_id = booking.slot_id
                self._transition(booking, BookingStatus.CANCELLED)
                if current.is_active:
                    self._release_slot(slot_id)
        return self._load(booking_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, booking_id: int, user_id: int) -> Booking:
        booking = self._load(booking_id)
        if booking.user_id != user_id and booking.artist.user_id != user_id:
            raise errors.Forbidden("You are not authorized to view this booking")
        return booking

    def list_for_artist(self, user_id: int) -> List[Booking]:
        artist = self.db.query(Artist).filter(Artist.user_id == user_id).first()
        if not artist:
            raise errors.Forbidden("Only artists can access their bookings")
        return (
            self.db.query(Booking)
            .options(
                joinedload(Booking.artist).joinedload(Artist.user),
                joinedload(Booking.client),
                joinedload(Booking.size),
                joinedload(Booking.placement),
            )
            .filter(Booking.artist_id == artist.artist_id)
            .order_by(Booking.created_at.desc(), Booking.booking_id.desc())
            .all()
        )

    def list_for_client(self, user_id: int, status: Optional[BookingStatus] = None) -> List[Booking]:
        query = (
            self.db.query(Booking)
            .options(
                joinedload(Booking.artist).joinedload(Artist.user),
                joinedload(Booking.size),
                joinedload(Booking.placement),
                joinedload(Booking.review),
            )
            .filter(Booking.user_id == user_id)
        )
        if status is not None:
            query = query.filter(Booking.status_id == STATUS_IDS[status])
        return query.order_by(Booking.created_at.desc(), Booking.booking_id.desc()).all()
