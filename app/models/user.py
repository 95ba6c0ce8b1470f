
from sqlalchemy import Column, String, Date, DateTime, Integer, func
from sqlalchemy.orm import relationship
from app.db.session import Base

class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(30), nullable=True)
    birth_date = Column(Date, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    artist = relationship("Artist", back_populates="user", uselist=False, cascade="all, delete-orphan")

    @property
    def is_artist(self) -> bool:
        return self.artist is not None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
