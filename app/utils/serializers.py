"""Convert ORM rows into response schemas."""

from typing import Optional

from app.models.appointment_slot import AppointmentSlot
from app.models.artist import Artist
from app.models.booking import Booking
from app.models.ledger import Favorite, Review, SavedAr
from app.models.tattoo import Tattoo
from app.models.user import User
from app.schemas.artist import (
    ArtistCity,
    ArtistDetail,
    ArtistListItem,
    ArtistSocial,
    ArtistSummary,
    ArtistTattoo,
)
from app.schemas.appointment_slot import Slot as SlotSchema
from app.schemas.booking import (
    Booking as BookingSchema,
    BookingAppointment,
    BookingArtist,
    BookingClient,
    BookingDetails,
    BookingReview,
)
from app.schemas.common import PersonName
from app.schemas.ledger import (
    Favorite as FavoriteSchema,
    Review as ReviewSchema,
    SavedAr as SavedArSchema,
)
from app.schemas.lookup import Style as StyleSchema
from app.schemas.tattoo import Tattoo as TattooSchema
from app.schemas.user import User as UserSchema


def serialize_artist_summary(artist: Artist) -> ArtistSummary:
    return ArtistSummary(
        artist_id=artist.artist_id,
        first_name=artist.user.first_name,
        last_name=artist.user.last_name,
        image_url=artist.image_url,
    )


def serialize_styles(styles) -> list:
    return [StyleSchema(id=s.style_id, name=s.style_name) for s in styles]


def serialize_slot(slot: AppointmentSlot) -> SlotSchema:
    return SlotSchema(
        id=slot.slot_id,
        date_time=slot.date_time,
        duration=slot.duration,
        is_booked=slot.is_booked,
    )


def serialize_booking(
    booking: Booking,
    include_contacts: bool = False,
    include_client: bool = False,
    include_review: bool = False,
) -> BookingSchema:
    """
    Build the booking projection.

    The base shape carries status, details, appointment and a short artist
    block. ``include_contacts`` adds artist contact and city fields,
    ``include_client`` the client block, ``include_review`` the review.
    """
    artist = booking.artist
    artist_user = artist.user
    artist_out = BookingArtist(
        artist_id=artist.artist_id,
        first_name=artist_user.first_name,
        last_name=artist_user.last_name,
        image_url=artist.image_url,
    )
    if include_contacts:
        artist_out.email = artist_user.email
        artist_out.phone_number = artist_user.phone_number
        artist_out.city = artist.city.name if artist.city else "Not specified"
        artist_out.country = artist.city.country_name if artist.city else "Not specified"
        artist_out.street_address = artist.street_address

    client_out: Optional[BookingClient] = None
    if include_client:
        client = booking.client
        client_out = BookingClient(
            user_id=client.user_id,
            first_name=client.first_name,
            last_name=client.last_name,
            email=client.email,
            phone_number=client.phone_number,
        )

    review_out: Optional[BookingReview] = None
    if include_review and booking.review is not None:
        r = booking.review
        review_out = BookingReview(
            review_id=r.review_id,
            rating=r.rating,
            comment=r.comment,
            created_at=r.created_at,
        )

    status = booking.status
    return BookingSchema(
        id=booking.booking_id,
        created_at=booking.created_at,
        status=status.label,
        status_id=booking.status_id,
        details=BookingDetails(
            size=booking.size.size,
            placement=booking.placement.placement,
            is_color=booking.is_color,
            reference_url=booking.reference_url,
            comment=booking.comment,
            price=booking.price,
            commission_amount=booking.commission_amount,
        ),
        appointment=BookingAppointment(
            slot_id=booking.slot_id,
            date_time=booking.appointment_at,
            duration=booking.duration,
        ),
        artist=artist_out,
        client=client_out,
        review=review_out,
    )


def serialize_tattoo(tattoo: Tattoo) -> TattooSchema:
    return TattooSchema(
        id=tattoo.tattoo_id,
        name=tattoo.tattoo_name,
        image_url=tattoo.image_url,
        artist=serialize_artist_summary(tattoo.artist),
        styles=serialize_styles(tattoo.styles),
    )


def serialize_review(review: Review) -> ReviewSchema:
    return ReviewSchema(
        id=review.review_id,
        booking_id=review.booking_id,
        rating=review.rating,
        comment=review.comment,
        created_at=review.created_at,
        reviewer=PersonName(
            first_name=review.user.first_name,
            last_name=review.user.last_name,
        ),
        artist=serialize_artist_summary(review.booking.artist),
    )


def serialize_favorite(favorite: Favorite) -> FavoriteSchema:
    return FavoriteSchema(id=favorite.fav_id, tattoo=serialize_tattoo(favorite.tattoo))


def serialize_saved_ar(saved: SavedAr) -> SavedArSchema:
    return SavedArSchema(id=saved.saved_id, image_url=saved.image_url, created_at=saved.created_at)


def _artist_city(artist: Artist) -> Optional[ArtistCity]:
    if artist.city is None:
        return None
    return ArtistCity(id=artist.city.city_id, name=artist.city.name, country=artist.city.country_name)


def serialize_artist_list_item(artist: Artist, rating: float) -> ArtistListItem:
    user = artist.user
    return ArtistListItem(
        artist_id=artist.artist_id,
        user_id=user.user_id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        image_url=artist.image_url,
        city=_artist_city(artist),
        description=artist.artist_description,
        address=artist.street_address,
        social=ArtistSocial(instagram=artist.instagram_link, portfolio=artist.portfolio_link),
        styles=serialize_styles(artist.styles),
        rating=rating,
    )


def serialize_artist_detail(artist: Artist, rating: float, review_count: int) -> ArtistDetail:
    item = serialize_artist_list_item(artist, rating)
    return ArtistDetail(
        **item.model_dump(),
        phone_number=artist.user.phone_number,
        review_count=review_count,
        tattoos=[
            ArtistTattoo(
                id=t.tattoo_id,
                name=t.tattoo_name,
                image_url=t.image_url,
                styles=serialize_styles(t.styles),
            )
            for t in artist.tattoos
        ],
    )


def serialize_user(user: User) -> UserSchema:
    artist = user.artist
    return UserSchema(
        user_id=user.user_id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone_number=user.phone_number,
        birth_date=user.birth_date,
        is_artist=artist is not None,
        artist_id=artist.artist_id if artist else None,
        created_at=user.created_at,
    )
