"""
General helper utilities
"""
import calendar
import uuid
from datetime import date, datetime, time


# Spanish short month names, as printed on the report charts
MONTH_ABBR_ES = ["ene", "feb", "mar", "abr", "may", "jun",
                 "jul", "ago", "sep", "oct", "nov", "dic"]
WEEKDAY_ABBR_ES = ["lun", "mar", "mié", "jue", "vie", "sáb", "dom"]


def new_id() -> str:
    """Globally unique opaque id for a new entity"""
    return str(uuid.uuid4())


def format_quantity(value: float) -> str:
    """Shortest decimal text for a quantity: 1.5 -> '1.5', 2.0 -> '2', 1e-07 -> '1e-07'"""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in ("", "0", "-0"):
        return "0" if value == 0 else repr(value)
    return text


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def subtract_months(day: date, months: int = 1) -> date:
    """Same day N calendar months earlier, clamped to the target month's length"""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def day_label(day: date) -> str:
    """Short chart label, e.g. '05 oct'"""
    return f"{day.day:02d} {MONTH_ABBR_ES[day.month - 1]}"


def weekday_label(day: date) -> str:
    return WEEKDAY_ABBR_ES[day.weekday()]
