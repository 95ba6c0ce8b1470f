
from typing import List, Optional
from pydantic import Field

from app.schemas.common import ApiResponse, CamelModel, PersonName, UTCDateTime
from app.schemas.artist import ArtistSummary
from app.schemas.tattoo import Tattoo


# Reviews
class ReviewCreate(CamelModel):
    booking_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class Review(CamelModel):
    id: int
    booking_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    reviewer: PersonName
    artist: Optional[ArtistSummary] = None


class ReviewResponse(ApiResponse):
    review: Review


class ReviewListResponse(ApiResponse):
    reviews: List[Review]
    average_rating: float = 0.0


# Favorites
class FavoriteCreate(CamelModel):
    tattoo_id: int


class Favorite(CamelModel):
    id: int
    tattoo: Tattoo


class FavoriteResponse(ApiResponse):
    favorite: Favorite


class FavoriteListResponse(ApiResponse):
    favorites: List[Favorite]


# Saved AR previews
class SavedArCreate(CamelModel):
    image_url: str = Field(alias="imageURL")


class SavedAr(CamelModel):
    id: int
    image_url: str = Field(alias="imageURL")
    created_at: Optional[UTCDateTime] = None


class SavedArResponse(ApiResponse):
    saved: SavedAr


class SavedArListResponse(ApiResponse):
    saved: List[SavedAr]
