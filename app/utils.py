import json
import logging
import random
import uuid
from datetime import datetime, timezone
from typing import List, Optional

logger = logging.getLogger(__name__)

BOOKING_CODE_MIN = 1000
BOOKING_CODE_MAX = 9999
RECORD_ID_MAX = 2**63 - 1


# =========================
# Time Handling
# =========================
def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# =========================
# Identifiers
# =========================
def generate_booking_code(prefix: str = "BK", rng: Optional[random.Random] = None) -> str:
    """Generate a human-facing booking code, e.g. BK4821."""
    rng = rng or random
    return f"{prefix}{rng.randint(BOOKING_CODE_MIN, BOOKING_CODE_MAX)}"


def generate_record_id() -> str:
    """Generate the opaque internal id of a booking"""
    return str(uuid.uuid4())


def is_storable_id(value: int) -> bool:
    """Integer keys beyond a signed 64-bit column can never match a row."""
    return -RECORD_ID_MAX - 1 <= value <= RECORD_ID_MAX


# =========================
# Schedule Serialization
# =========================
def dump_sequence(values: Optional[List[str]]) -> str:
    return json.dumps(list(values or []))


def load_sequence(raw: Optional[str], field: str = "sequence") -> List[str]:
    """Parse a JSON array column; malformed data yields an empty list."""
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Malformed {field} value, expected a JSON array: {raw!r}")
        return []
    if not isinstance(value, list):
        logger.warning(f"Unexpected {field} value, expected a JSON array: {raw!r}")
        return []
    return [str(item) for item in value]
