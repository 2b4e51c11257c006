"""GPS time to UTC conversion for LAS point timestamps."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

GPS_EPOCH = datetime(1980, 1, 6, tzinfo=timezone.utc)

# Offset subtracted from GPS seconds in "adjusted standard GPS time"
ADJUSTED_GPS_OFFSET = 1.0e9

# UTC instants at which a leap second took effect since the GPS epoch
LEAP_SECONDS: tuple[datetime, ...] = tuple(
    datetime(y, m, 1, tzinfo=timezone.utc)
    for y, m in (
        (1981, 7), (1982, 7), (1983, 7), (1985, 7), (1988, 1), (1990, 1),
        (1991, 1), (1992, 7), (1993, 7), (1994, 7), (1996, 1), (1997, 7),
        (1999, 1), (2006, 1), (2009, 1), (2012, 7), (2015, 7), (2017, 1),
    )
)


def gps_to_datetime(gps_seconds: float) -> datetime:
    """Convert seconds since the GPS epoch to a UTC datetime.

    GPS time does not observe leap seconds, so the UTC result lags the
    naive epoch offset by the number of leap seconds inserted so far.
    """
    naive = GPS_EPOCH + timedelta(seconds=gps_seconds)
    leaps = 0
    for instant in LEAP_SECONDS:
        # a leap second applies once GPS time has run past it plus the
        # leaps already counted
        if naive >= instant + timedelta(seconds=leaps + 1):
            leaps += 1
        else:
            break
    return naive - timedelta(seconds=leaps)


def adjusted_gps_to_datetime(adjusted_seconds: float) -> datetime:
    """Convert adjusted standard GPS time (GPS seconds minus 1e9)."""
    return gps_to_datetime(adjusted_seconds + ADJUSTED_GPS_OFFSET)
