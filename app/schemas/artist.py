
from typing import List, Optional
from pydantic import Field

from app.schemas.common import ApiResponse, CamelModel
from app.schemas.lookup import Style


# Compact artist for nested responses (tattoos, bookings, reviews)
class ArtistSummary(CamelModel):
    artist_id: int
    first_name: str
    last_name: str
    image_url: Optional[str] = Field(None, alias="imageURL")


class ArtistCity(CamelModel):
    id: int
    name: str
    country: str


class ArtistSocial(CamelModel):
    instagram: Optional[str] = None
    portfolio: Optional[str] = None


# GET /artists list item
class ArtistListItem(ArtistSummary):
    user_id: int
    email: str
    city: Optional[ArtistCity] = None
    description: Optional[str] = None
    address: Optional[str] = None
    social: ArtistSocial
    styles: List[Style] = []
    rating: float = 0.0


class ArtistTattoo(CamelModel):
    id: int
    name: Optional[str] = None
    image_url: str = Field(alias="imageURL")
    styles: List[Style] = []


# GET /artists/{id}
class ArtistDetail(ArtistListItem):
    phone_number: Optional[str] = None
    review_count: int = 0
    tattoos: List[ArtistTattoo] = []


class ArtistResponse(ApiResponse):
    artist: ArtistDetail


# PATCH /artists/{id}
class ArtistUpdate(CamelModel):
    artist_description: Optional[str] = None
    street_address: Optional[str] = None
    instagram_link: Optional[str] = None
    portfolio_link: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageURL")
    city_id: Optional[int] = None
    style_ids: Optional[List[int]] = None


# Artist membership checkout (POST /register/artist/checkout)
class ArtistCheckoutRequest(CamelModel):
    artist_description: str = Field(min_length=1)
    city_id: int
    style_ids: List[int] = Field(min_length=1)
    street_address: Optional[str] = None
    instagram_link: Optional[str] = None
    portfolio_link: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageURL")


class CheckoutSessionResponse(ApiResponse):
    url: str
    session_id: str


# POST /register/artist/confirm
class ArtistConfirmRequest(CamelModel):
    session_id: str = Field(min_length=1)
