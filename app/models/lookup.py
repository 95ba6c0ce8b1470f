
from sqlalchemy import Column, String, Integer
from app.db.session import Base

class City(Base):
    __tablename__ = "cities"

    city_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    country_name = Column(String(100), nullable=False)

class Style(Base):
    __tablename__ = "styles"

    style_id = Column(Integer, primary_key=True, autoincrement=True)
    style_name = Column(String(100), unique=True, nullable=False)

class Size(Base):
    __tablename__ = "sizes"

    size_id = Column(Integer, primary_key=True, autoincrement=True)
    size = Column(String(50), unique=True, nullable=False)

class Placement(Base):
    __tablename__ = "placements"

    placement_id = Column(Integer, primary_key=True, autoincrement=True)
    placement = Column(String(50), unique=True, nullable=False)

class BookingStatusRow(Base):
    """Storage-side label table for BookingStatus ids."""
    __tablename__ = "booking_statuses"

    status_id = Column(Integer, primary_key=True, autoincrement=False)
    status = Column(String(30), unique=True, nullable=False)
