"""
Time specifications: how cases map to dates, and the seasonal period.
"""

from enum import Enum

from pystatcore.core.exceptions import ValidationError


class TimeSpec(Enum):
    """Dating schemes a series can carry."""
    Y = 'y'
    YS = 'ys'
    YQ = 'yq'
    YM = 'ym'
    WWD5 = 'wwd5'
    WWD6 = 'wwd6'
    WD = 'wd'
    DWH = 'dwh'
    DH = 'dh'
    ND = 'nd'


_PERIODICITY = {
    TimeSpec.Y: 0,
    TimeSpec.YS: 2,
    TimeSpec.YQ: 4,
    TimeSpec.YM: 12,
    TimeSpec.WWD5: 5,
    TimeSpec.WWD6: 6,
    TimeSpec.WD: 7,
    TimeSpec.DWH: 8,
    TimeSpec.DH: 24,
    TimeSpec.ND: 0,
}

_LABELS = {
    TimeSpec.Y: 'Years',
    TimeSpec.YS: 'Years-Semesters',
    TimeSpec.YQ: 'Years-Quarters',
    TimeSpec.YM: 'Years-Months',
    TimeSpec.WWD5: 'Weeks-Work Days(5)',
    TimeSpec.WWD6: 'Weeks-Work Days(6)',
    TimeSpec.WD: 'Weeks-Days',
    TimeSpec.DWH: 'Days-Work Hours(8)',
    TimeSpec.DH: 'Days-Hour',
    TimeSpec.ND: 'Not Dated',
}


def as_time_spec(value: 'TimeSpec | str | None') -> TimeSpec | None:
    """Accept a TimeSpec, its string value ('ym') or None."""
    if value is None or isinstance(value, TimeSpec):
        return value
    try:
        return TimeSpec(str(value).lower())
    except ValueError:
        raise ValidationError(f"time_spec: unknown time specification {value!r}") from None


def periodicity(spec: TimeSpec) -> int:
    """Seasonal period of a time specification; 0 when it has none."""
    return _PERIODICITY[spec]


def spec_label(spec: TimeSpec) -> str:
    return _LABELS[spec]


def _format(spec: TimeSpec, major: int, minor: int) -> str:
    if spec is TimeSpec.Y:
        return str(major)
    if spec is TimeSpec.YS:
        return f"{major}S{minor}"
    if spec is TimeSpec.YQ:
        return f"{major}Q{minor}"
    if spec is TimeSpec.YM:
        return f"{major}-{minor:02d}"
    if spec in (TimeSpec.WWD5, TimeSpec.WWD6, TimeSpec.WD):
        return f"week {major} day {minor}"
    return f"day {major} hour {minor}"


def generate_dates(
    spec: TimeSpec,
    n: int,
    start_period: int = 1,
    start_position: int = 1,
) -> list[str]:
    """
    Date labels for n consecutive cases.

    Args:
        spec: Time specification
        n: Number of labels
        start_period: First year / week / day
        start_position: Position of the first case within its cycle (1-based)

    Returns:
        Labels such as '2020', '2020S2', '2020Q1', '2020-01', 'week 1 day 3',
        'day 2 hour 8'; for ND the case numbers '1'..'n'

    Raises:
        ValidationError: If start_position is outside 1..periodicity
    """
    if spec is TimeSpec.ND:
        return [str(i + 1) for i in range(n)]

    period = periodicity(spec)
    if spec is TimeSpec.Y:
        return [str(start_period + i) for i in range(n)]

    if not (1 <= start_position <= period):
        raise ValidationError(
            f"start_position: must be between 1 and {period}, got {start_position}"
        )
    labels = []
    offset = start_position - 1
    for i in range(n):
        major, minor = divmod(offset + i, period)
        labels.append(_format(spec, start_period + major, minor + 1))
    return labels
