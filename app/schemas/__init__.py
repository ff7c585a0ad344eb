# Schemas package (re-export feature modules for stable imports)
from .bookings.booking import *
from .doctors.doctor import *
from .common.common import *
