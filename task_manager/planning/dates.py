"""Working-day calendar and due-date parsing.

Due dates are stored as free-form strings ("5/Mar", "03/05", "today"), so
everything here works on ``datetime.date`` values and turns unparseable input
into ``None`` instead of raising.

Known ambiguity: a string like ``3/4`` always takes the ``MM/DD`` path
(4 March). A generic parser could read the same digits as 3 April; both paths
are kept and nothing here tries to guess which one the user meant.
"""

import re
from datetime import date, datetime, timedelta

# Singapore public holidays, keyed by year
SINGAPORE_HOLIDAYS_2026 = frozenset(
    date.fromisoformat(d)
    for d in (
        "2026-01-01",  # New Year's Day
        "2026-01-29",  # Chinese New Year
        "2026-01-30",  # Chinese New Year
        "2026-04-18",  # Good Friday
        "2026-05-01",  # Labour Day
        "2026-05-26",  # Vesak Day
        "2026-08-09",  # National Day
        "2026-08-31",  # Hari Raya Haji
        "2026-10-24",  # Deepavali
        "2026-12-25",  # Christmas Day
    )
)

HOLIDAYS: dict[int, frozenset[date]] = {
    2026: SINGAPORE_HOLIDAYS_2026,
}

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

MONTH_DAY_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})$")
DAY_MONTH_ABBR_PATTERN = re.compile(r"^(\d{1,2})/([A-Za-z]{3})$")

# Layouts tried by the generic fallback, in order
FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%a %b %d %Y",
)


def _as_date(value: date | datetime) -> date:
    # datetime is a subclass of date; normalise to midnight
    return value.date() if isinstance(value, datetime) else value


def is_holiday(day: date) -> bool:
    """Check if a date is in the holiday table for its year."""
    day = _as_date(day)
    return day in HOLIDAYS.get(day.year, frozenset())


def is_working_day(day: date) -> bool:
    """Monday to Friday and not a holiday."""
    day = _as_date(day)
    return day.weekday() < 5 and not is_holiday(day)


def calculate_working_days(start: date, end: date) -> int:
    """
    Count working days after ``start`` up to and including ``end``.

    Returns 0 when ``start`` is after ``end``.
    """
    start, end = _as_date(start), _as_date(end)
    if start > end:
        return 0

    count = 0
    current = start + timedelta(days=1)
    while current <= end:
        if is_working_day(current):
            count += 1
        current += timedelta(days=1)
    return count


def add_working_days(start: date, working_days: int) -> date:
    """Step forward one calendar day at a time until ``working_days`` have passed."""
    current = _as_date(start)
    added = 0
    while added < working_days:
        current += timedelta(days=1)
        if is_working_day(current):
            added += 1
    return current


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _parse_fallback(text: str) -> date | None:
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_due_date(text: str | None, today: date | None = None) -> date | None:
    """
    Parse a free-form due date.

    Supported, in this order:
        - ``MM/DD`` (current year): "03/05" -> 5 March
        - ``DD/MMM`` (current year): "28/Mar"
        - "today", "tomorrow"
        - ISO dates and a few common layouts ("Mar 28 2026", "28 Mar 2026")

    Returns None for empty or unparseable input. Phrases with "next"
    ("next week") are not understood and return None.
    """
    if not text or not isinstance(text, str):
        return None

    text = text.strip()
    today = today or date.today()

    match = MONTH_DAY_PATTERN.match(text)
    if match:
        month, day = int(match.group(1)), int(match.group(2))
        return _safe_date(today.year, month, day)

    match = DAY_MONTH_ABBR_PATTERN.match(text)
    if match:
        day, month_str = int(match.group(1)), match.group(2).lower()
        months = [m.lower() for m in MONTH_ABBR]
        if month_str not in months:
            return None
        return _safe_date(today.year, months.index(month_str) + 1, day)

    lowered = text.lower()
    if lowered == "today":
        return today
    if lowered == "tomorrow":
        return today + timedelta(days=1)
    if "next" in lowered:
        return None

    return _parse_fallback(text)


def format_date_to_ddmmm(value: date | str | None, today: date | None = None) -> str:
    """Format a date as ``D/MMM`` (``5/Mar``). Strings are parsed first."""
    if not value:
        return ""

    if isinstance(value, str):
        parsed = parse_due_date(value, today=today)
        if parsed is None:
            return ""
        value = parsed

    value = _as_date(value)
    return f"{value.day}/{MONTH_ABBR[value.month - 1]}"


def get_working_days_until_due(
    due: date | str | None, today: date | None = None
) -> int | None:
    """
    Signed number of working days between today and the due date.

    Positive - working days left, negative - working days overdue,
    None - no due date or it could not be parsed.
    """
    if not due:
        return None

    today = _as_date(today or date.today())
    due_day = parse_due_date(due, today=today) if isinstance(due, str) else _as_date(due)
    if due_day is None:
        return None

    if due_day >= today:
        return calculate_working_days(today, due_day)
    return -calculate_working_days(due_day, today)
