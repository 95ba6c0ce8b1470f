from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_catalogue_service, get_current_user
from app.core import errors
from app.core.security import Identity
from app.schemas.artist import ArtistListItem, ArtistResponse, ArtistUpdate
from app.schemas.common import PaginatedResponse, total_pages
from app.services.catalogue import ArtistSort, CatalogueService
from app.utils.serializers import serialize_artist_detail, serialize_artist_list_item

router = APIRouter(prefix="/artists", tags=["Artists"])


def parse_id_list(raw: Optional[str], name: str) -> Optional[List[int]]:
    """Parse a comma-separated id filter such as ``cityIds=1,4``."""
    if not raw:
        return None
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError:
        raise errors.ValidationError(f"Invalid {name} filter")


@router.get("", response_model=PaginatedResponse[ArtistListItem])
def list_artists(
    city_ids: Optional[str] = Query(None, alias="cityIds"),
    style_ids: Optional[str] = Query(None, alias="styleIds"),
    search: Optional[str] = Query(None),
    sort_by: ArtistSort = Query(ArtistSort.RATING_DESC, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    catalogue: CatalogueService = Depends(get_catalogue_service),
):
    """
    Browse artists. No authentication required.

    - **cityIds / styleIds**: comma-separated ids
    - **search**: matches first or last name, case-insensitive
    - **sortBy**: ratingDesc (default), ratingAsc or newest
    """
    rows, total = catalogue.list_artists(
        city_ids=parse_id_list(city_ids, "cityIds"),
        style_ids=parse_id_list(style_ids, "styleIds"),
        search=search,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return PaginatedResponse[ArtistListItem](
        data=[serialize_artist_list_item(artist, rating) for artist, rating in rows],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit),
    )


@router.get("/{artist_id}", response_model=ArtistResponse)
def get_artist(artist_id: int, catalogue: CatalogueService = Depends(get_catalogue_service)):
    artist, rating, review_count = catalogue.get_artist(artist_id)
    return ArtistResponse(artist=serialize_artist_detail(artist, rating, review_count))


@router.patch("/{artist_id}", response_model=ArtistResponse)
def update_artist(
    artist_id: int,
    data: ArtistUpdate,
    current_user: Identity = Depends(get_current_user),
    catalogue: CatalogueService = Depends(get_catalogue_service),
):
    catalogue.update_artist(artist_id, current_user.user_id, data)
    artist, rating, review_count = catalogue.get_artist(artist_id)
    return ArtistResponse(
        message="Artist profile updated successfully",
        artist=serialize_artist_detail(artist, rating, review_count),
    )
