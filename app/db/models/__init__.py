# Models package (re-export feature modules for stable imports)
from .clinic.doctor import Doctor
from .clinic.booking import Booking

__all__ = [
    "Doctor",
    "Booking",
]
