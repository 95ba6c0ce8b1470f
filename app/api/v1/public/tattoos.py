from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_catalogue_service, get_current_user
from app.api.v1.public.artists import parse_id_list
from app.core.security import Identity
from app.schemas.common import PaginatedResponse, total_pages
from app.schemas.tattoo import Tattoo, TattooCreate, TattooResponse, TattooUpdate
from app.services.catalogue import CatalogueService
from app.utils.serializers import serialize_tattoo

router = APIRouter(prefix="/tattoos", tags=["Tattoos"])


@router.get("", response_model=PaginatedResponse[Tattoo])
def list_tattoos(
    artist_id: Optional[int] = Query(None, alias="artistId"),
    style_ids: Optional[str] = Query(None, alias="styleIds"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=50),
    catalogue: CatalogueService = Depends(get_catalogue_service),
):
    """Browse tattoos, newest first. No authentication required."""
    tattoos, total = catalogue.list_tattoos(
        artist_id=artist_id,
        style_ids=parse_id_list(style_ids, "styleIds"),
        page=page,
        limit=limit,
    )
    return PaginatedResponse[Tattoo](
        data=[serialize_tattoo(t) for t in tattoos],
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages(total, limit),
    )


@router.post("", response_model=TattooResponse, status_code=status.HTTP_201_CREATED)
def create_tattoo(
    data: TattooCreate,
    current_user: Identity = Depends(get_current_user),
    catalogue: CatalogueService = Depends(get_catalogue_service),
):
    tattoo = catalogue.create_tattoo(current_user.user_id, data)
    return TattooResponse(message="Tattoo uploaded successfully", tattoo=serialize_tattoo(tattoo))


@router.patch("/{tattoo_id}", response_model=TattooResponse)
def update_tattoo(
    tattoo_id: int,
    data: TattooUpdate,
    current_user: Identity = Depends(get_current_user),
    catalogue: CatalogueService = Depends(get_catalogue_service),
):
    tattoo = catalogue.update_tattoo(tattoo_id, current_user.user_id, data)
    return TattooResponse(message="Tattoo updated successfully", tattoo=serialize_tattoo(tattoo))
