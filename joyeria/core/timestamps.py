"""Datetime helpers for columns shared with the legacy schema scripts"""
from datetime import timezone as dt_timezone

from django.utils import timezone


def as_aware(value):
    """
    Attach UTC to a naive datetime.

    Columns created as plain TIMESTAMP hand back naive values; Django writes
    them in UTC, so that is the zone they are read back in.
    """
    if value is not None and timezone.is_naive(value):
        return timezone.make_aware(value, dt_timezone.utc)
    return value
