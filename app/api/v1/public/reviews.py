from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_user, get_review_service
from app.core.security import Identity
from app.schemas.common import ApiResponse
from app.schemas.ledger import ReviewCreate, ReviewListResponse, ReviewResponse
from app.services.ledger import ReviewService
from app.utils.serializers import serialize_review

router = APIRouter(prefix="/reviews", tags=["Reviews"])
artist_reviews_router = APIRouter(prefix="/artists", tags=["Reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    data: ReviewCreate,
    current_user: Identity = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    """
    Review a booking.

    Rules:
    - Rating must be 1–5.
    - Only the booking's client can review it, once.
    - The appointment time must have passed.
    """
    review = reviews.create(current_user.user_id, data.booking_id, data.rating, data.comment)
    return ReviewResponse(message="Review submitted successfully", review=serialize_review(review))


@router.delete("/{review_id}", response_model=ApiResponse)
def delete_review(
    review_id: int,
    current_user: Identity = Depends(get_current_user),
    reviews: ReviewService = Depends(get_review_service),
):
    reviews.delete(review_id, current_user.user_id)
    return ApiResponse(message="Review deleted successfully")


@artist_reviews_router.get("/{artist_id}/reviews", response_model=ReviewListResponse)
def list_artist_reviews(
    artist_id: int,
    reviews: ReviewService = Depends(get_review_service),
):
    """Reviews left on an artist's bookings, newest first. No authentication required."""
    result, average = reviews.list_for_artist(artist_id)
    return ReviewListResponse(
        reviews=[serialize_review(r) for r in result],
        average_rating=average,
    )
