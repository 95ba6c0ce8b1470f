
from sqlalchemy import Column, Boolean, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship
from app.db.session import Base

class AppointmentSlot(Base):
    __tablename__ = "appointment_slots"

    slot_id = Column(Integer, primary_key=True, autoincrement=True)
    artist_id = Column(Integer, ForeignKey("artists.artist_id", ondelete="CASCADE"), nullable=False, index=True)
    date_time = Column(DateTime, nullable=False, index=True)  # naive UTC
    duration = Column(Integer, nullable=False)  # minutes
    is_booked = Column(Boolean, nullable=False, default=False)

    # Relationships
    artist = relationship("Artist", back_populates="slots")
    bookings = relationship("Booking", back_populates="slot")
