
from typing import List, Optional
from pydantic import Field

from app.schemas.common import ApiResponse, CamelModel
from app.schemas.artist import ArtistSummary
from app.schemas.lookup import Style


# Tattoo — Create (POST /tattoos)
class TattooCreate(CamelModel):
    tattoo_name: Optional[str] = None
    image_url: str = Field(alias="imageURL", min_length=1)
    style_ids: List[int] = Field(min_length=1)


# Tattoo — Update (PATCH /tattoos/{id})
class TattooUpdate(CamelModel):
    tattoo_name: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageURL", min_length=1)
    style_ids: Optional[List[int]] = Field(None, min_length=1)


class Tattoo(CamelModel):
    id: int
    name: Optional[str] = None
    image_url: str = Field(alias="imageURL")
    artist: ArtistSummary
    styles: List[Style] = []


class TattooResponse(ApiResponse):
    tattoo: Tattoo
