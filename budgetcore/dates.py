"""Calendar-month helpers and display formatting.

Months are plain ``YYYY-MM`` strings and dates ``YYYY-MM-DD`` strings.
Nothing here reads the system clock; callers pass ``today`` in.
"""

from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from budgetcore import config


def parse_month(month: str) -> Tuple[int, int]:
    year, mon = month.split("-")[:2]
    return int(year), int(mon)


def month_of(day: str) -> str:
    """Year-month prefix of an ISO date."""
    return day[:7]


def current_month(today: date) -> str:
    return today.strftime("%Y-%m")


def shift_month(month: str, delta: int) -> str:
    year, mon = parse_month(month)
    index = year * 12 + (mon - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def previous_month(month: str) -> str:
    return shift_month(month, -1)


def month_window(end_month: str, size: int = config.TREND_WINDOW_MONTHS) -> Tuple[str, ...]:
    """The ``size`` months ending at ``end_month``, oldest first."""
    return tuple(shift_month(end_month, offset) for offset in range(1 - size, 1))


def upcoming_months(start_month: str, count: int = 12) -> Tuple[str, ...]:
    return tuple(shift_month(start_month, offset) for offset in range(count))


def month_bounds(month: str) -> Tuple[date, date]:
    year, mon = parse_month(month)
    last_day = calendar.monthrange(year, mon)[1]
    return date(year, mon, 1), date(year, mon, last_day)


def in_month(day: str, month: str) -> bool:
    start, end = month_bounds(month)
    return start <= date.fromisoformat(day[:10]) <= end


def month_name(month: str) -> str:
    year, mon = parse_month(month)
    return f"{calendar.month_name[mon]} {year}"


def month_label(month: str) -> str:
    year, mon = parse_month(month)
    return f"{calendar.month_abbr[mon]} {year}"


def format_date(day: str) -> str:
    return date.fromisoformat(day[:10]).strftime("%b %d, %Y")


def format_currency(amount: float, symbol: str = config.CURRENCY_SYMBOL) -> str:
    """Whole-unit currency string, e.g. ``₹1,235`` or ``-₹40``.

    Rounds half away from zero; fractional units are never shown.
    """
    rounded = int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,}"
