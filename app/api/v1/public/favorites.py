from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_favorite_service, get_saved_ar_service
from app.core.security import Identity
from app.schemas.common import ApiResponse
from app.schemas.ledger import (
    FavoriteCreate,
    FavoriteListResponse,
    FavoriteResponse,
    SavedArCreate,
    SavedArListResponse,
    SavedArResponse,
)
from app.services.ledger import FavoriteService, SavedArService
from app.utils.serializers import serialize_favorite, serialize_saved_ar

router = APIRouter(prefix="/favorites", tags=["Favorites"])
saved_ars_router = APIRouter(prefix="/savedars", tags=["Saved AR"])


# ---------------------------------------------------------------------------
# Favorite tattoos
# ---------------------------------------------------------------------------


@router.post("", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
def add_favorite(
    data: FavoriteCreate,
    current_user: Identity = Depends(get_current_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    favorite = favorites.add(current_user.user_id, data.tattoo_id)
    return FavoriteResponse(message="Tattoo added to favorites", favorite=serialize_favorite(favorite))


@router.get("", response_model=FavoriteListResponse)
def list_favorites(
    current_user: Identity = Depends(get_current_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    return FavoriteListResponse(
        favorites=[serialize_favorite(f) for f in favorites.list(current_user.user_id)]
    )


@router.delete("/{fav_id}", response_model=ApiResponse)
def remove_favorite(
    fav_id: int,
    current_user: Identity = Depends(get_current_user),
    favorites: FavoriteService = Depends(get_favorite_service),
):
    favorites.remove(fav_id, current_user.user_id)
    return ApiResponse(message="Tattoo removed from favorites")


# ---------------------------------------------------------------------------
# Saved AR previews
# ---------------------------------------------------------------------------


@saved_ars_router.post("", response_model=SavedArResponse, status_code=status.HTTP_201_CREATED)
def save_ar(
    data: SavedArCreate,
    current_user: Identity = Depends(get_current_user),
    saved_ars: SavedArService = Depends(get_saved_ar_service),
):
    saved = saved_ars.save(current_user.user_id, data.image_url)
    return SavedArResponse(message="Image saved successfully", saved=serialize_saved_ar(saved))


@saved_ars_router.get("", response_model=SavedArListResponse)
def list_saved_ars(
    current_user: Identity = Depends(get_current_user),
    saved_ars: SavedArService = Depends(get_saved_ar_service),
):
    return SavedArListResponse(
        saved=[serialize_saved_ar(s) for s in saved_ars.list(current_user.user_id)]
    )


@saved_ars_router.delete("/{saved_id}", response_model=ApiResponse)
def delete_saved_ar(
    saved_id: int,
    current_user: Identity = Depends(get_current_user),
    saved_ars: SavedArService = Depends(get_saved_ar_service),
):
    saved_ars.delete(saved_id, current_user.user_id)
    return ApiResponse(message="Saved image deleted successfully")
