from fastapi import APIRouter, Depends

from app.api.deps import get_account_service, get_current_user
from app.core.security import Identity
from app.schemas.common import ApiResponse
from app.schemas.user import UserResponse, UserUpdate
from app.services.accounts import AccountService
from app.utils.serializers import serialize_user

router = APIRouter(prefix="/users/me", tags=["Me"])


@router.get("", response_model=UserResponse)
def get_me(
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    return UserResponse(user=serialize_user(accounts.get_profile(current_user.user_id)))


@router.patch("", response_model=UserResponse)
def update_me(
    data: UserUpdate,
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Update profile fields. Only fields present in the body change."""
    user = accounts.update_profile(current_user.user_id, data)
    return UserResponse(message="Profile updated successfully", user=serialize_user(user))


@router.delete("", response_model=ApiResponse)
def delete_me(
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
):
    """Delete the account. Refused while it has upcoming active bookings as client or artist."""
    accounts.delete_account(current_user.user_id)
    return ApiResponse(message="Account deleted successfully")
