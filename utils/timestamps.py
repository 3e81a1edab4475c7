"""
Timestamp helpers.

All persisted timestamps are naive local time, so that "since local
midnight" windows compare the same way on SQLite and PostgreSQL.
"""

from datetime import datetime, timedelta


def now() -> datetime:
    return datetime.now()


def local_midnight(reference: datetime = None) -> datetime:
    """Start of the current local day."""
    reference = reference or now()
    return reference.replace(hour=0, minute=0, second=0, microsecond=0)


def next_local_midnight(reference: datetime = None) -> datetime:
    """Start of the next local day, used as the reset point of daily quotas."""
    return local_midnight(reference) + timedelta(days=1)


def start_of_week(reference: datetime = None) -> datetime:
    """Monday 00:00 of the current week."""
    midnight = local_midnight(reference)
    return midnight - timedelta(days=midnight.weekday())


def start_of_month(reference: datetime = None) -> datetime:
    return local_midnight(reference).replace(day=1)
