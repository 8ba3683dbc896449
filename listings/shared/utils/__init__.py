from listings.shared.utils.datetime import (
    MonotonicClock,
    audit_clock,
    ensure_utc,
    parse_iso_datetime,
    utc_now,
)
from listings.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "MonotonicClock",
    "audit_clock",
]
