# Routers package
from . import bookings_router
from . import doctors_router

__all__ = [
    "bookings_router",
    "doctors_router",
]
