
from app.db.session import Base
from app.models.user import User
from app.models.lookup import City, Style, Size, Placement, BookingStatusRow
from app.models.artist import Artist
from app.models.tattoo import Tattoo
from app.models.appointment_slot import AppointmentSlot
from app.models.booking import Booking
from app.models.ledger import Review, Favorite, SavedAr
