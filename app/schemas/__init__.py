from app.schemas.common import ApiResponse, ErrorResponse, PaginatedResponse, PersonName
from app.schemas.user import User, UserCreate, UserUpdate, LoginRequest, TokenResponse, UserResponse
from app.schemas.lookup import City, Style, Size, Placement, BookingStatus
from app.schemas.artist import (
    ArtistSummary, ArtistListItem, ArtistDetail, ArtistUpdate,
    ArtistCheckoutRequest, ArtistConfirmRequest, CheckoutSessionResponse,
)
from app.schemas.tattoo import Tattoo, TattooCreate, TattooUpdate
from app.schemas.appointment_slot import (
    Slot, SlotCreate, DaySlotsCreate, AvailableSlot, ArtistSlot,
)
from app.schemas.booking import (
    Booking, BookingCreate, BookingPriceUpdate, BookingStatusUpdate, QuoteAction,
)
from app.schemas.ledger import (
    Review, ReviewCreate, Favorite, FavoriteCreate, SavedAr, SavedArCreate,
)
