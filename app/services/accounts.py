"""
User accounts and the paid artist membership.

A user becomes an artist by paying the membership fee through Stripe
Checkout; the artist profile is only created once the session is reported
paid. Profile fields travel through the session metadata.
"""

import logging
from typing import Dict, List, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core import errors
from app.core.config import Settings
from app.core.security import IdentityProvider, get_password_hash, verify_password
from app.db.unit_of_work import unit_of_work
from app.models.artist import Artist
from app.models.booking import ACTIVE_STATUS_IDS, Booking
from app.models.lookup import City, Style
from app.models.user import User
from app.schemas.artist import ArtistCheckoutRequest
from app.schemas.user import UserCreate, UserUpdate
from app.services.payments import CheckoutSession, StripeGateway
from app.utils.timeslots import utcnow

logger = logging.getLogger(__name__)

MEMBERSHIP_PRODUCT = "Artist Membership"

# Optional profile fields copied through the checkout session metadata
PROFILE_FIELDS = ("artist_description", "street_address", "instagram_link", "portfolio_link", "image_url")


def _parse_ids(raw: str) -> List[int]:
    return [int(part) for part in raw.split(",") if part.strip()]


class AccountService:
    def __init__(self, db: Session, settings: Settings, identity: IdentityProvider):
        self.db = db
        self.settings = settings
        self.identity = identity

    def issue_token(self, user: User) -> str:
        artist = user.artist
        return self.identity.issue(
            user.user_id,
            is_artist=artist is not None,
            artist_id=artist.artist_id if artist else None,
        )

    def _get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise errors.NotFound("User not found")
        return user

    def _validate_profile_refs(self, city_id: int, style_ids: List[int]) -> List[Style]:
        if self.db.get(City, city_id) is None:
            raise errors.ValidationError("Invalid city ID provided")
        styles = self.db.query(Style).filter(Style.style_id.in_(style_ids)).all()
        if len(styles) != len(set(style_ids)):
            raise errors.ValidationError("Invalid style ID provided")
        return styles

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    def register_user(self, data: UserCreate) -> Tuple[User, str]:
        email = data.email.lower()
        with unit_of_work(self.db, conflict_message="Email already in use"):
            if self.db.query(User).filter(User.email == email).first():
                raise errors.Conflict("Email already in use")
            user = User(
                email=email,
                password_hash=get_password_hash(data.password),
                first_name=data.first_name,
                last_name=data.last_name,
                phone_number=data.phone_number,
                birth_date=data.birth_date,
                created_at=utcnow(),
            )
            self.db.add(user)
        self.db.refresh(user)
        logger.info("Registered user %s.", user.user_id)
        return user, self.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.db.query(User).filter(User.email == email.lower()).first()
        if not user or not verify_password(password, user.password_hash):
            raise errors.Unauthenticated("Invalid email or password.")
        return user, self.issue_token(user)

    # ------------------------------------------------------------------
    # Artist membership
    # ------------------------------------------------------------------

    def start_artist_checkout(
        self, user_id: int, data: ArtistCheckoutRequest, gateway: StripeGateway
    ) -> CheckoutSession:
        user = self._get_user(user_id)
        if user.artist is not None:
            raise errors.Conflict("User is already registered as an artist")
        self._validate_profile_refs(data.city_id, data.style_ids)

        metadata: Dict[str, str] = {
            "userId": str(user_id),
            "cityId": str(data.city_id),
            "styleIds": ",".join(str(s) for s in data.style_ids),
        }
        for name in PROFILE_FIELDS:
            value = getattr(data, name)
            if value:
                metadata[name] = value

        session = gateway.create_checkout_session(
            MEMBERSHIP_PRODUCT, self.settings.ARTIST_MEMBERSHIP_FEE, metadata
        )
        logger.info("User %s started artist checkout %s.", user_id, session.session_id)
        return session

    def confirm_artist_membership(
        self, user_id: int, session_id: str, gateway: StripeGateway
    ) -> Tuple[User, str]:
        status = gateway.retrieve_session(session_id)
        if status.payment_status != "paid":
            raise errors.ValidationError("Payment not completed")
        metadata = status.metadata
        if metadata.get("userId") != str(user_id):
            raise errors.Forbidden("Checkout session belongs to another user")

        try:
            city_id = int(metadata["cityId"])
            style_ids = _parse_ids(metadata.get("styleIds", ""))
        except (KeyError, ValueError):
            raise errors.ValidationError("Checkout session is missing artist details")

        with unit_of_work(self.db, conflict_message="User is already registered as an artist"):
            user = self._get_user(user_id)
            if user.artist is not None:
                raise errors.Conflict("User is already registered as an artist")
            styles = self._validate_profile_refs(city_id, style_ids)
            artist = Artist(
                user_id=user_id,
                city_id=city_id,
                membership_fee=self.settings.ARTIST_MEMBERSHIP_FEE,
                created_at=utcnow(),
                **{name: metadata.get(name) for name in PROFILE_FIELDS},
            )
            artist.styles = styles
            self.db.add(artist)
        self.db.refresh(user)
        logger.info("User %s became artist %s.", user_id, user.artist.artist_id)
        return user, self.issue_token(user)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_profile(self, user_id: int) -> User:
        return self._get_user(user_id)

    def update_profile(self, user_id: int, data: UserUpdate) -> User:
        with unit_of_work(self.db):
            user = self._get_user(user_id)
            changes = data.model_dump(exclude_unset=True)
            password = changes.pop("password", None)
            for key, value in changes.items():
                if value is None and key in ("first_name", "last_name"):
                    continue
                setattr(user, key, value)
            if password:
                user.password_hash = get_password_hash(password)
        self.db.refresh(user)
        return user

    def delete_account(self, user_id: int) -> None:
        with unit_of_work(self.db):
            user = self._get_user(user_id)
            clauses = [Booking.user_id == user_id]
            if user.artist is not None:
                clauses.append(Booking.artist_id == user.artist.artist_id)
            active = (
                self.db.query(Booking.booking_id)
                .filter(
                    or_(*clauses),
                    Booking.status_id.in_(ACTIVE_STATUS_IDS),
                    # Past appointments never leave Confirmed; only upcoming ones block
                    Booking.appointment_at >= utcnow(),
                )
                .first()
            )
            if active:
                raise errors.Conflict("Cannot delete an account with upcoming bookings")
            self.db.delete(user)
        logger.info("Deleted user %s.", user_id)
