
from typing import Optional
from pydantic import EmailStr, Field
from datetime import date

from app.schemas.common import ApiResponse, CamelModel, UTCDateTime


# Properties to receive via API on creation (POST /register/user)
class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone_number: Optional[str] = None
    birth_date: date


# POST /login
class LoginRequest(CamelModel):
    email: EmailStr
    password: str


# Properties to receive via API on update (PATCH /users/me)
class UserUpdate(CamelModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    phone_number: Optional[str] = None
    birth_date: Optional[date] = None
    password: Optional[str] = Field(None, min_length=8)


# Properties returned via API
class User(CamelModel):
    user_id: int
    email: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None
    birth_date: Optional[date] = None
    is_artist: bool = False
    artist_id: Optional[int] = None
    created_at: Optional[UTCDateTime] = None


class UserResponse(ApiResponse):
    user: User


class TokenResponse(ApiResponse):
    token: str
    user: User
