from fastapi import APIRouter, Depends

from app.api.deps import get_catalogue_service
from app.schemas.lookup import (
    BookingStatus,
    BookingStatusListResponse,
    City,
    CityListResponse,
    Placement,
    PlacementListResponse,
    Size,
    SizeListResponse,
    Style,
    StyleListResponse,
)
from app.services.catalogue import CatalogueService

router = APIRouter(tags=["Lookups"])


@router.get("/cities", response_model=CityListResponse)
def list_cities(catalogue: CatalogueService = Depends(get_catalogue_service)):
    return CityListResponse(
        cities=[City(id=c.city_id, name=c.name, country=c.country_name) for c in catalogue.cities()]
    )


@router.get("/styles", response_model=StyleListResponse)
def list_styles(catalogue: CatalogueService = Depends(get_catalogue_service)):
    return StyleListResponse(
        styles=[Style(id=s.style_id, name=s.style_name) for s in catalogue.styles()]
    )


@router.get("/sizes", response_model=SizeListResponse)
def list_sizes(catalogue: CatalogueService = Depends(get_catalogue_service)):
    return SizeListResponse(sizes=[Size(id=s.size_id, size=s.size) for s in catalogue.sizes()])


@router.get("/placements", response_model=PlacementListResponse)
def list_placements(catalogue: CatalogueService = Depends(get_catalogue_service)):
    return PlacementListResponse(
        placements=[Placement(id=p.placement_id, placement=p.placement) for p in catalogue.placements()]
    )


@router.get("/bookingStatuses", response_model=BookingStatusListResponse)
def list_booking_statuses(catalogue: CatalogueService = Depends(get_catalogue_service)):
    return BookingStatusListResponse(
        booking_statuses=[
            BookingStatus(id=s.status_id, status=s.status) for s in catalogue.booking_statuses()
        ]
    )
