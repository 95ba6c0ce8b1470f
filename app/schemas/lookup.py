
from typing import List

from app.schemas.common import ApiResponse, CamelModel


class City(CamelModel):
    id: int
    name: str
    country: str


class Style(CamelModel):
    id: int
    name: str


class Size(CamelModel):
    id: int
    size: str


class Placement(CamelModel):
    id: int
    placement: str


class BookingStatus(CamelModel):
    id: int
    status: str


class CityListResponse(ApiResponse):
    cities: List[City]


class StyleListResponse(ApiResponse):
    styles: List[Style]


class SizeListResponse(ApiResponse):
    sizes: List[Size]


class PlacementListResponse(ApiResponse):
    placements: List[Placement]


class BookingStatusListResponse(ApiResponse):
    booking_statuses: List[BookingStatus]
