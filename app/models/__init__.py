
from app.models.user import User
from app.models.lookup import City, Style, Size, Placement, BookingStatusRow
from app.models.artist import Artist, artist_styles
from app.models.tattoo import Tattoo, tattoo_styles
from app.models.appointment_slot import AppointmentSlot
from app.models.booking import Booking, BookingStatus, STATUS_IDS, STATUS_BY_ID, ACTIVE_STATUS_IDS
from app.models.ledger import Review, Favorite, SavedAr
