"""UTC to local wall-clock conversion with a fixed offset."""

from __future__ import annotations

from dataclasses import dataclass

_SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class LocalClock:
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int


def _days_from_civil(y: int, m: int, d: int) -> int:
    """Days since 1970-01-01 for a proleptic Gregorian date."""
    if m <= 2:
        y -= 1
    era = y // 400
    yoe = y - era * 400
    doy = (153 * (m + (-3 if m > 2 else 9)) + 2) // 5 + d - 1
    doe = yoe * 365 + yoe // 4 - yoe // 100 + doy
    return era * 146097 + doe - 719468


def _civil_from_days(z: int) -> tuple:
    """Inverse of _days_from_civil."""
    z += 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    d = doy - (153 * mp + 2) // 5 + 1
    m = mp + 3 if mp < 10 else mp - 9
    y = yoe + era * 400 + (1 if m <= 2 else 0)
    return y, m, d


def local_from_utc(
    year: int, month: int, day: int, hour: int, minute: int, second: int, offset_min: int
) -> LocalClock:
    """Shift a UTC time by `offset_min` minutes east of UTC, rolling the date."""
    secs = (
        _days_from_civil(year, month, day) * _SECONDS_PER_DAY
        + hour * 3600
        + minute * 60
        + second
        + offset_min * 60
    )
    days, sod = divmod(secs, _SECONDS_PER_DAY)
    y, m, d = _civil_from_days(days)
    return LocalClock(y, m, d, sod // 3600, (sod % 3600) // 60, sod % 60)