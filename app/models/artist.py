
from sqlalchemy import Column, String, DateTime, func, DECIMAL, Integer, ForeignKey, Text, Table
from sqlalchemy.orm import relationship
from app.db.session import Base

artist_styles = Table(
    "artist_styles",
    Base.metadata,
    Column("artist_id", Integer, ForeignKey("artists.artist_id", ondelete="CASCADE"), primary_key=True),
    Column("style_id", Integer, ForeignKey("styles.style_id"), primary_key=True),
)

class Artist(Base):
    __tablename__ = "artists"

    artist_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False)
    city_id = Column(Integer, ForeignKey("cities.city_id"), nullable=True, index=True)
    artist_description = Column(Text, nullable=True)
    street_address = Column(String(255), nullable=True)
    instagram_link = Column(String(255), nullable=True)
    portfolio_link = Column(String(255), nullable=True)
    image_url = Column(Text, nullable=True)
    membership_fee = Column(DECIMAL(10, 2), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="artist")
    city = relationship("City")
    styles = relationship("Style", secondary=artist_styles, order_by="Style.style_id")
    tattoos = relationship("Tattoo", back_populates="artist", cascade="all, delete-orphan")
    slots = relationship("AppointmentSlot", back_populates="artist", cascade="all, delete-orphan")
