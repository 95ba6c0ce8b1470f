
from sqlalchemy import Column, String, DateTime, func, Integer, ForeignKey, Text, Table
from sqlalchemy.orm import relationship
from app.db.session import Base

tattoo_styles = Table(
    "tattoo_styles",
    Base.metadata,
    Column("tattoo_id", Integer, ForeignKey("tattoos.tattoo_id", ondelete="CASCADE"), primary_key=True),
    Column("style_id", Integer, ForeignKey("styles.style_id"), primary_key=True),
)

class Tattoo(Base):
    __tablename__ = "tattoos"

    tattoo_id = Column(Integer, primary_key=True, autoincrement=True)
    artist_id = Column(Integer, ForeignKey("artists.artist_id", ondelete="CASCADE"), nullable=False, index=True)
    tattoo_name = Column(String(255), nullable=True)
    image_url = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    artist = relationship("Artist", back_populates="tattoos")
    styles = relationship("Style", secondary=tattoo_styles, order_by="Style.style_id")
