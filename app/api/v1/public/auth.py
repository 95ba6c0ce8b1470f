from fastapi import APIRouter, Depends, status

from app.api.deps import get_account_service, get_current_user, get_payment_gateway
from app.core.security import Identity
from app.models.user import User
from app.schemas.artist import ArtistCheckoutRequest, ArtistConfirmRequest, CheckoutSessionResponse
from app.schemas.user import LoginRequest, TokenResponse, UserCreate
from app.services.accounts import AccountService
from app.services.payments import StripeGateway
from app.utils.serializers import serialize_user

router = APIRouter(tags=["Auth"])


def _build_token_response(user: User, token: str, message: str) -> TokenResponse:
    return TokenResponse(message=message, token=token, user=serialize_user(user))


@router.post("/register/user", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register_user(body: UserCreate, accounts: AccountService = Depends(get_account_service)):
    user, token = accounts.register_user(body)
    return _build_token_response(user, token, "User registered successfully")


@router.post("/register/artist/checkout", response_model=CheckoutSessionResponse)
def start_artist_checkout(
    body: ArtistCheckoutRequest,
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Start the artist membership payment.

    Returns a Stripe Checkout URL. The artist profile is created by
    /register/artist/confirm once the session is paid.
    """
    session = accounts.start_artist_checkout(current_user.user_id, body, gateway)
    return CheckoutSessionResponse(
        message="Checkout session created",
        url=session.url,
        session_id=session.session_id,
    )


@router.post("/register/artist/confirm", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def confirm_artist_membership(
    body: ArtistConfirmRequest,
    current_user: Identity = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    user, token = accounts.confirm_artist_membership(current_user.user_id, body.session_id, gateway)
    return _build_token_response(user, token, "Artist registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    user, token = accounts.login(body.email, body.password)
    return _build_token_response(user, token, "Login successful")
