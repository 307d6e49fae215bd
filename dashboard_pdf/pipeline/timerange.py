"""Parsing and labeling of dashboard from/to time parameters."""

import calendar
import re
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

RELATIVE_TIME = re.compile(r"^now-(\d+)([smhdwMy])(?:/[smhdwMy])?$")

UNIT_DELTAS = {
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

# Fixed English month names keep labels independent of the process locale
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Move back a number of calendar months, clamping the day to the month length."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_time_expression(expression: str | None, now: datetime) -> datetime:
    """
    Resolve a from/to value to an absolute time.

    Accepts "now", "now-<k><unit>" with unit in s, m, h, d, w, M, y (an optional
    trailing "/<unit>" rounding suffix is ignored) and epoch milliseconds.
    Anything else, including offsets reaching outside the representable
    date range, resolves to now.

    Args:
        expression: Raw parameter value
        now: Reference time, timezone-aware

    Returns:
        Timezone-aware datetime
    """
    if not expression:
        return now

    value = expression.strip()
    if value == "now":
        return now

    match = RELATIVE_TIME.match(value)
    if match:
        amount = int(match.group(1))
        unit = match.group(2)
        try:
            if unit == "M":
                return subtract_months(now, amount)
            if unit == "y":
                return subtract_months(now, amount * 12)
            return now - UNIT_DELTAS[unit] * amount
        except (OverflowError, ValueError):
            return now

    if value.isdigit():
        try:
            return datetime.fromtimestamp(int(value) / 1000, tz=UTC)
        except (OverflowError, OSError, ValueError):
            return now

    return now


def format_timestamp(moment: datetime, tz: ZoneInfo) -> str:
    """Render a time as e.g. "March 5, 2024, 02:07 PM" in the given timezone.

    Raises:
        OverflowError: The local time falls outside the representable range
    """
    local = moment.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{MONTH_NAMES[local.month - 1]} {local.day}, {local.year}, "
        f"{hour:02d}:{local.minute:02d} {meridiem}"
    )


def format_time_range(
    from_expression: str | None,
    to_expression: str | None,
    now: datetime,
    timezone: str,
) -> str:
    """
    Build the human-readable time range shown in the document header.

    Both ends are rendered in a fixed timezone. When either end is missing the
    label is the current time only.
    """
    tz = ZoneInfo(timezone)
    if not from_expression or not to_expression:
        return format_timestamp(now, tz)

    ends = []
    for expression in (from_expression, to_expression):
        moment = parse_time_expression(expression, now)
        try:
            ends.append(format_timestamp(moment, tz))
        except (OverflowError, ValueError):
            # e.g. year 1 shifted west of UTC
            ends.append(format_timestamp(now, tz))
    return " to ".join(ends)
