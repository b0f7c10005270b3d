"""Axis label formatting for prices and timestamps."""

from datetime import datetime, timezone

DAY_MS = 24 * 60 * 60 * 1000
WEEK_MS = 7 * DAY_MS

# Fixed en-US style labels independent of the process locale
_MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
           'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')


def format_price_label(value: float) -> str:
    """
    Format a price for the Y axis with precision based on magnitude.

    Examples:
        >>> format_price_label(1523.4)
        '$1.5K'
        >>> format_price_label(0.0034)
        '$0.003400'
    """
    if value >= 1000:
        return f"${value / 1000:.1f}K"
    if value >= 1:
        return f"${value:.2f}"
    if value >= 0.01:
        return f"${value:.3f}"
    return f"${value:.6f}"


def _format_date(moment: datetime) -> str:
    return f"{_MONTHS[moment.month - 1]} {moment.day}"


def _format_clock(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = 'AM' if moment.hour < 12 else 'PM'
    return f"{hour:02d}:{moment.minute:02d} {suffix}"


def format_time_label(timestamp_ms: float, time_range_ms: float) -> str:
    """
    Format a timestamp for the X axis.

    Ranges over a week show the date, ranges over a day show the date and time
    on two lines, shorter ranges show the time only. Times are in UTC.

    Args:
        timestamp_ms: Tick timestamp in milliseconds
        time_range_ms: Span of the whole series in milliseconds

    Returns:
        Label text, possibly containing a newline
    """
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)

    if time_range_ms > WEEK_MS:
        return _format_date(moment)

    if time_range_ms > DAY_MS:
        return f"{_format_date(moment)}\n{_format_clock(moment)}"

    return _format_clock(moment)
