
import enum
from sqlalchemy import Column, Boolean, DateTime, func, DECIMAL, Integer, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from app.db.session import Base

class BookingStatus(str, enum.Enum):
    REQUESTED = "requested"
    QUOTED = "quoted"
    CONFIRMED = "confirmed"
    DECLINED = "declined"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    @property
    def is_active(self) -> bool:
        return self in ACTIVE_STATUSES

# Storage boundary: booking_statuses.status_id <-> BookingStatus
STATUS_IDS = {
    BookingStatus.REQUESTED: 1,
    BookingStatus.QUOTED: 2,
    BookingStatus.CONFIRMED: 3,
    BookingStatus.DECLINED: 4,
    BookingStatus.CANCELLED: 5,
}
STATUS_BY_ID = {status_id: status for status, status_id in STATUS_IDS.items()}

STATUS_LABELS = {
    BookingStatus.REQUESTED: "Pending",
    BookingStatus.QUOTED: "Quoted",
    BookingStatus.CONFIRMED: "Confirmed",
    BookingStatus.DECLINED: "Declined",
    BookingStatus.CANCELLED: "Cancelled",
}

ACTIVE_STATUSES = frozenset(
    {BookingStatus.REQUESTED, BookingStatus.QUOTED, BookingStatus.CONFIRMED}
)
ACTIVE_STATUS_IDS = sorted(STATUS_IDS[s] for s in ACTIVE_STATUSES)


class Booking(Base):
    __tablename__ = "bookings"

    booking_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)  # client
    artist_id = Column(Integer, ForeignKey("artists.artist_id", ondelete="CASCADE"), nullable=False, index=True)
    # Nulled when a freed slot is deleted; the appointment snapshot stays
    slot_id = Column(Integer, ForeignKey("appointment_slots.slot_id", ondelete="SET NULL"), nullable=True, index=True)
    status_id = Column(Integer, ForeignKey("booking_statuses.status_id"), nullable=False, index=True)
    size_id = Column(Integer, ForeignKey("sizes.size_id"), nullable=False)
    placement_id = Column(Integer, ForeignKey("placements.placement_id"), nullable=False)
    is_color = Column(Boolean, nullable=False, default=False)
    reference_url = Column(Text, nullable=True)
    comment = Column(Text, nullable=True)
    price = Column(DECIMAL(10, 2), nullable=True)
    commission_amount = Column(DECIMAL(10, 2), nullable=True)
    appointment_at = Column(DateTime, nullable=False)  # naive UTC, copied from the slot
    duration = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # One active booking per slot
    __table_args__ = (
        Index(
            "uq_bookings_active_slot",
            "slot_id",
            unique=True,
            postgresql_where=status_id.in_(ACTIVE_STATUS_IDS),
            sqlite_where=status_id.in_(ACTIVE_STATUS_IDS),
        ),
    )

    # Relationships
    client = relationship("User", foreign_keys=[user_id])
    artist = relationship("Artist")
    slot = relationship("AppointmentSlot", back_populates="bookings")
    size = relationship("Size")
    placement = relationship("Placement")
    review = relationship("Review", back_populates="booking", uselist=False, cascade="all, delete-orphan")

    @property
    def status(self) -> BookingStatus:
        return STATUS_BY_ID[self.status_id]

    @status.setter
    def status(self, value: BookingStatus) -> None:
        self.status_id = STATUS_IDS[value]
