from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import Identity, IdentityProvider
from app.db.session import get_db
from app.services.accounts import AccountService
from app.services.bookings import BookingService
from app.services.catalogue import CatalogueService
from app.services.ledger import FavoriteService, ReviewService, SavedArService
from app.services.payments import StripeGateway
from app.services.slots import SlotRepository

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity_provider(request: Request) -> IdentityProvider:
    return request.app.state.identity


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """Resolve the caller from the bearer token: 401 without one, 403 when invalid."""
    token = credentials.credentials if credentials else None
    return identity.verify(token)


def get_payment_gateway(settings: Settings = Depends(get_settings)) -> StripeGateway:
    return StripeGateway(settings)


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


def get_slot_repository(
    db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
) -> SlotRepository:
    return SlotRepository(db, settings)


def get_booking_service(
    db: Session = Depends(get_db), settings: Settings = Depends(get_settings)
) -> BookingService:
    return BookingService(db, settings)


def get_account_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> AccountService:
    return AccountService(db, settings, identity)


def get_catalogue_service(db: Session = Depends(get_db)) -> CatalogueService:
    return CatalogueService(db)


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    return ReviewService(db)


def get_favorite_service(db: Session = Depends(get_db)) -> FavoriteService:
    return FavoriteService(db)


def get_saved_ar_service(db: Session = Depends(get_db)) -> SavedArService:
    return SavedArService(db)
