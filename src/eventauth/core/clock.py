"""Time source used for token issuance and expiry checks."""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime, truncated to whole seconds.

    Token expiry travels as unix seconds, so sub-second precision would
    make a parsed expiry differ from the one that was issued.
    """
    return datetime.now(timezone.utc).replace(microsecond=0)
