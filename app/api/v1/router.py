from fastapi import APIRouter

# Auth & accounts
from app.api.v1.public.auth import router as auth_router
from app.api.v1.public.me import router as me_router

# Catalogue
from app.api.v1.public.lookups import router as lookups_router
from app.api.v1.public.artists import router as artists_router
from app.api.v1.public.tattoos import router as tattoos_router

# Appointment slots & bookings
from app.api.v1.public.appointments import router as appointments_router
from app.api.v1.public.bookings import router as bookings_router

# Reviews, favorites, saved AR previews
from app.api.v1.public.reviews import router as reviews_router, artist_reviews_router
from app.api.v1.public.favorites import router as favorites_router, saved_ars_router

api_router = APIRouter()

# --- Auth & accounts ---
api_router.include_router(auth_router)
api_router.include_router(me_router)

# --- Catalogue ---
api_router.include_router(lookups_router)
api_router.include_router(artists_router)
api_router.include_router(artist_reviews_router)
api_router.include_router(tattoos_router)

# --- Appointment slots & bookings ---
api_router.include_router(appointments_router)
api_router.include_router(bookings_router)

# --- Reviews, favorites, saved AR previews ---
api_router.include_router(reviews_router)
api_router.include_router(favorites_router)
api_router.include_router(saved_ars_router)
