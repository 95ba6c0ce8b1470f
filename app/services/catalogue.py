"""Artist and tattoo browsing, plus the lookup tables."""

import enum
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core import errors
from app.db.unit_of_work import unit_of_work
from app.models.artist import Artist, artist_styles
from app.models.booking import Booking
from app.models.ledger import Review
from app.models.lookup import BookingStatusRow, City, Placement, Size, Style
from app.models.tattoo import Tattoo, tattoo_styles
from app.models.user import User
from app.schemas.artist import ArtistUpdate
from app.schemas.tattoo import TattooCreate, TattooUpdate
from app.utils.timeslots import utcnow

logger = logging.getLogger(__name__)


class ArtistSort(str, enum.Enum):
    RATING_DESC = "ratingDesc"
    RATING_ASC = "ratingAsc"
    NEWEST = "newest"


def _rating_subquery(db: Session):
    return (
        db.query(
            Booking.artist_id.label("artist_id"),
            func.avg(Review.rating).label("rating"),
            func.count(Review.review_id).label("review_count"),
        )
        .join(Review, Review.booking_id == Booking.booking_id)
        .group_by(Booking.artist_id)
        .subquery()
    )


def _rounded(value) -> float:
    return round(float(value), 1) if value is not None else 0.0


class CatalogueService:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def cities(self) -> List[City]:
        return self.db.query(City).order_by(City.country_name, City.name).all()

    def styles(self) -> List[Style]:
        return self.db.query(Style).order_by(Style.style_id).all()

    def sizes(self) -> List[Size]:
        return self.db.query(Size).order_by(Size.size_id).all()

    def placements(self) -> List[Placement]:
        return self.db.query(Placement).order_by(Placement.placement_id).all()

    def booking_statuses(self) -> List[BookingStatusRow]:
        return self.db.query(BookingStatusRow).order_by(BookingStatusRow.status_id).all()

    def _styles_for(self, style_ids: Sequence[int]) -> List[Style]:
        wanted = set(style_ids)
        styles = self.db.query(Style).filter(Style.style_id.in_(wanted)).all()
        if len(styles) != len(wanted):
            raise errors.ValidationError("Invalid style ID provided")
        return styles

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    def list_artists(
        self,
        city_ids: Optional[List[int]] = None,
        style_ids: Optional[List[int]] = None,
        search: Optional[str] = None,
        sort_by: ArtistSort = ArtistSort.RATING_DESC,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Tuple[Artist, float]], int]:
        """Filtered page of artists with their average rating, plus the total count."""
        ratings = _rating_subquery(self.db)
        rating = func.coalesce(ratings.c.rating, 0)

        query = (
            self.db.query(Artist, rating)
            .join(User, User.user_id == Artist.user_id)
            .outerjoin(ratings, ratings.c.artist_id == Artist.artist_id)
        )
        if city_ids:
            query = query.filter(Artist.city_id.in_(city_ids))
        if style_ids:
            query = query.filter(
                Artist.artist_id.in_(
                    self.db.query(artist_styles.c.artist_id).filter(
                        artist_styles.c.style_id.in_(style_ids)
                    )
                )
            )
        if search:
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(func.lower(User.first_name).like(pattern), func.lower(User.last_name).like(pattern))
            )

        total = query.count()

        if sort_by == ArtistSort.RATING_ASC:
            query = query.order_by(rating.asc(), Artist.artist_id.asc())
        elif sort_by == ArtistSort.NEWEST:
            query = query.order_by(Artist.created_at.desc(), Artist.artist_id.desc())
        else:
            query = query.order_by(rating.desc(), Artist.artist_id.asc())

        rows = (
            query.options(
                joinedload(Artist.user),
                joinedload(Artist.city),
                selectinload(Artist.styles),
            )
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return [(artist, _rounded(value)) for artist, value in rows], total

    def get_artist(self, artist_id: int) -> Tuple[Artist, float, int]:
        artist = (
            self.db.query(Artist)
            .options(
                joinedload(Artist.user),
                joinedload(Artist.city),
                selectinload(Artist.styles),
                selectinload(Artist.tattoos).selectinload(Tattoo.styles),
            )
            .filter(Artist.artist_id == artist_id)
            .first()
        )
        if not artist:
            raise errors.NotFound("Artist not found")
        average, count = (
            self.db.query(func.avg(Review.rating), func.count(Review.review_id))
            .join(Booking, Booking.booking_id == Review.booking_id)
            .filter(Booking.artist_id == artist_id)
            .one()
        )
        return artist, _rounded(average), count or 0

    def update_artist(self, artist_id: int, user_id: int, data: ArtistUpdate) -> None:
        with unit_of_work(self.db):
            artist = self.db.get(Artist, artist_id)
            if not artist:
                raise errors.NotFound("Artist not found")
            if artist.user_id != user_id:
                raise errors.Forbidden("You can only update your own artist profile")

            changes = data.model_dump(exclude_unset=True)
            style_ids = changes.pop("style_ids", None)
            if "city_id" in changes and changes["city_id"] is not None:
                if self.db.get(City, changes["city_id"]) is None:
                    raise errors.ValidationError("Invalid city ID provided")
            for key, value in changes.items():
                setattr(artist, key, value)
            if style_ids is not None:
                artist.styles = self._styles_for(style_ids)
        logger.info("Artist %s updated their profile.", artist_id)

    # ------------------------------------------------------------------
    # Tattoos
    # ------------------------------------------------------------------

    def _tattoo_query(self):
        return self.db.query(Tattoo).options(
            joinedload(Tattoo.artist).joinedload(Artist.user),
            selectinload(Tattoo.styles),
        )

    def list_tattoos(
        self,
        artist_id: Optional[int] = None,
        style_ids: Optional[List[int]] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Tattoo], int]:
        query = self._tattoo_query()
        if artist_id is not None:
            query = query.filter(Tattoo.artist_id == artist_id)
        if style_ids:
            query = query.filter(
                Tattoo.tattoo_id.in_(
                    self.db.query(tattoo_styles.c.tattoo_id).filter(
                        tattoo_styles.c.style_id.in_(style_ids)
                    )
                )
            )
        total = query.count()
        tattoos = (
            query.order_by(Tattoo.created_at.desc(), Tattoo.tattoo_id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return tattoos, total

    def create_tattoo(self, user_id: int, data: TattooCreate) -> Tattoo:
        with unit_of_work(self.db):
            artist = self.db.query(Artist).filter(Artist.user_id == user_id).first()
            if not artist:
                raise errors.Forbidden("Only artists can upload tattoos")
            tattoo = Tattoo(
                artist_id=artist.artist_id,
                tattoo_name=data.tattoo_name,
                image_url=data.image_url,
                created_at=utcnow(),
            )
            tattoo.styles = self._styles_for(data.style_ids)
            self.db.add(tattoo)
            self.db.flush()
            tattoo_id = tattoo.tattoo_id
        logger.info("Artist %s added tattoo %s.", artist.artist_id, tattoo_id)
        return self._tattoo_query().filter(Tattoo.tattoo_id == tattoo_id).first()

    def update_tattoo(self, tattoo_id: int, user_id: int, data: TattooUpdate) -> Tattoo:
        with unit_of_work(self.db):
            tattoo = self.db.get(Tattoo, tattoo_id)
            if not tattoo:
                raise errors.NotFound("Tattoo not found")
            if tattoo.artist.user_id != user_id:
                raise errors.Forbidden("You can only update your own tattoos")
            changes: Dict = data.model_dump(exclude_unset=True)
            style_ids = changes.pop("style_ids", None)
            for key, value in changes.items():
                if value is not None:
                    setattr(tattoo, key, value)
            if style_ids is not None:
                tattoo.styles = self._styles_for(style_ids)
        return self._tattoo_query().filter(Tattoo.tattoo_id == tattoo_id).first()
