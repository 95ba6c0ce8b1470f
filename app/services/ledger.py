"""Reviews, favorite tattoos and saved AR previews."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.core import errors
from app.db.unit_of_work import unit_of_work
from app.models.artist import Artist
from app.models.booking import Booking
from app.models.ledger import Favorite, Review, SavedAr
from app.models.tattoo import Tattoo
from app.utils.timeslots import utcnow

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, review_id: int) -> Review:
        return (
            self.db.query(Review)
            .options(
                joinedload(Review.user),
                joinedload(Review.booking).joinedload(Booking.artist).joinedload(Artist.user),
            )
            .filter(Review.review_id == review_id)
            .first()
        )

    def create(self, user_id: int, booking_id: int, rating: int, comment: Optional[str] = None) -> Review:
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise errors.ValidationError("Rating must be an integer between 1 and 5")

        with unit_of_work(self.db, conflict_message="You have already reviewed this booking"):
            booking = self.db.get(Booking, booking_id)
            if not booking:
                raise errors.NotFound("Booking not found")
            if booking.user_id != user_id:
                raise errors.Forbidden("You can only review your own bookings")
            if self.db.query(Review).filter(Review.booking_id == booking_id).first():
                raise errors.Conflict("You have already reviewed this booking")
            if booking.appointment_at >= utcnow():
                raise errors.ValidationError("You can only review past appointments")

            review = Review(
                user_id=user_id,
                booking_id=booking_id,
                rating=rating,
                comment=comment,
                created_at=utcnow(),
            )
            self.db.add(review)
            self.db.flush()
            review_id = review.review_id

        logger.info("User %s reviewed booking %s (%d stars).", user_id, booking_id, rating)
        return self._load(review_id)

    def delete(self, review_id: int, user_id: int) -> None:
        with unit_of_work(self.db):
            review = self.db.get(Review, review_id)
            if not review:
                raise errors.NotFound("Review not found")
            if review.user_id != user_id:
                raise errors.Forbidden("You can only delete your own reviews")
            self.db.delete(review)
        logger.info("User %s deleted review %s.", user_id, review_id)

    def list_for_artist(self, artist_id: int) -> Tuple[List[Review], float]:
        """Reviews left on an artist's bookings, newest first, with their average."""
        if self.db.get(Artist, artist_id) is None:
            raise errors.NotFound("Artist not found")
        reviews = (
            self.db.query(Review)
            .join(Booking, Booking.booking_id == Review.booking_id)
            .options(
                joinedload(Review.user),
                joinedload(Review.booking).joinedload(Booking.artist).joinedload(Artist.user),
            )
            .filter(Booking.artist_id == artist_id)
            .order_by(Review.created_at.desc(), Review.review_id.desc())
            .all()
        )
        average = (
            self.db.query(func.avg(Review.rating))
            .join(Booking, Booking.booking_id == Review.booking_id)
            .filter(Booking.artist_id == artist_id)
            .scalar()
        )
        return reviews, round(float(average), 1) if average is not None else 0.0


class FavoriteService:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Favorite).options(
            joinedload(Favorite.tattoo).joinedload(Tattoo.artist).joinedload(Artist.user),
            joinedload(Favorite.tattoo).joinedload(Tattoo.styles),
        )

    def add(self, user_id: int, tattoo_id: int) -> Favorite:
        with unit_of_work(self.db, conflict_message="Tattoo already in favorites"):
            if self.db.get(Tattoo, tattoo_id) is None:
                raise errors.NotFound("Tattoo not found")
            exists = (
                self.db.query(Favorite)
                .filter(Favorite.user_id == user_id, Favorite.tattoo_id == tattoo_id)
                .first()
            )
            if exists:
                raise errors.Conflict("Tattoo already in favorites")
            favorite = Favorite(user_id=user_id, tattoo_id=tattoo_id, created_at=utcnow())
            self.db.add(favorite)
            self.db.flush()
            fav_id = favorite.fav_id
        return self._query().filter(Favorite.fav_id == fav_id).first()

    def remove(self, fav_id: int, user_id: int) -> None:
        with unit_of_work(self.db):
            favorite = self.db.get(Favorite, fav_id)
            if not favorite:
                raise errors.NotFound("Favorite not found")
            if favorite.user_id != user_id:
                raise errors.Forbidden("You can only remove your own favorites")
            self.db.delete(favorite)

    def list(self, user_id: int) -> List[Favorite]:
        return (
            self._query()
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.fav_id.desc())
            .all()
        )


class SavedArService:
    def __init__(self, db: Session):
        self.db = db

    def save(self, user_id: int, image_url: str) -> SavedAr:
        image_url = (image_url or "").strip()
        if not image_url:
            raise errors.ValidationError("Image URL is required")
        with unit_of_work(self.db, conflict_message="This image is already saved"):
            exists = (
                self.db.query(SavedAr)
                .filter(SavedAr.user_id == user_id, SavedAr.image_url == image_url)
                .first()
            )
            if exists:
                raise errors.Conflict("This image is already saved")
            saved = SavedAr(user_id=user_id, image_url=image_url, created_at=utcnow())
            self.db.add(saved)
        self.db.refresh(saved)
        return saved

    def delete(self, saved_id: int, user_id: int) -> None:
        with unit_of_work(self.db):
            saved = self.db.get(SavedAr, saved_id)
            if not saved:
                raise errors.NotFound("Saved image not found")
            if saved.user_id != user_id:
                raise errors.Forbidden("You can only delete your own saved images")
            self.db.delete(saved)

    def list(self, user_id: int) -> List[SavedAr]:
        return (
            self.db.query(SavedAr)
            .filter(SavedAr.user_id == user_id)
            .order_by(SavedAr.created_at.desc(), SavedAr.saved_id.desc())
            .all()
        )
