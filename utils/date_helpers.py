from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["DD/MM/YYYY", "MM/DD/YYYY", "YYYY-MM-DD", "DD.MM.YYYY"]

_STRFTIME_MAP = {
    "DD/MM/YYYY": "%d/%m/%Y",
    "MM/DD/YYYY": "%m/%d/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
}

_SHORT_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                 "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def parse_date(date_str: str) -> date | None:
    """Parse YYYY-MM-DD or a full ISO timestamp, returning None on failure.

    Only the calendar part is kept; a time-of-day is ignored.
    """
    if not date_str:
        return None
    if isinstance(date_str, datetime):
        return date_str.date()
    if isinstance(date_str, date):
        return date_str
    head = str(date_str).strip().split("T")[0].split(" ")[0]
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(head, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def is_same_day(d1: date, d2: date) -> bool:
    return (d1.year, d1.month, d1.day) == (d2.year, d2.month, d2.day)


def start_of_week(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def is_same_week(d1: date, d2: date) -> bool:
    return start_of_week(d1) == start_of_week(d2)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Roll a month index outside 1-12 into the neighbouring years."""
    idx = year * 12 + (month - 1)
    return idx // 12, idx % 12 + 1


def month_index(d: date) -> int:
    return d.year * 12 + (d.month - 1)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    year, month = normalize_month(year, month)
    max_day = days_in_month(year, month)
    return max(1, min(day, max_day))


def add_months(d: date, n: int) -> date:
    """Add n months to date d, clamping day to month end."""
    year, month = normalize_month(d.year, d.month + n)
    day = clamp_day_to_month(year, month, d.day)
    return date(year, month, day)


def iter_days(start: date, end: date):
    """Yield every date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def days_remaining_in_year(ref: date) -> int:
    """Days from ref through December 31 of the same year, inclusive."""
    return max(0, (date(ref.year, 12, 31) - ref).days + 1)


def start_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day)


def end_of_day(d: date) -> datetime:
    return datetime(d.year, d.month, d.day, 23, 59, 59, 999999)


def short_date(d: date) -> str:
    """e.g. '05 Mar'."""
    return f"{d.day:02d} {_SHORT_MONTHS[d.month - 1]}"


def period_label(start: date, end: date) -> str:
    return f"{short_date(start)} - {short_date(end)}"


def friendly_month(d: date) -> str:
    """e.g. 'February 2026'."""
    return d.strftime("%B %Y")


def format_display_date(date_str: str, fmt_key: str = "DD/MM/YYYY") -> str:
    """Convert a YYYY-MM-DD (or ISO timestamp) string to the user-facing format."""
    if not date_str:
        return date_str
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%d/%m/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%d/%m/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
