"""
Timezone utilities.

The daily spin gate and the ledger day are defined by the server's configured
``TIMEZONE``, not by UTC.
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo


def get_local_now(tz_name: str) -> datetime:
    """Current time in the configured timezone."""
    return datetime.now(ZoneInfo(tz_name))


def get_local_today(tz_name: str) -> date:
    """Current calendar date in the configured timezone."""
    return get_local_now(tz_name).date()
