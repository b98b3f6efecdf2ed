from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from core.services.rows import ProductionRow, clamp_kenya_sales
from core.utils import month_label, parse_number, resolve_month_key, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyAggregate:
    month_key: str
    month: int
    year: int
    bottles: float
    kenya: float
    uk: float
    cumulative_kenya: float
    cumulative_uk: float
    cumulative_total: float


def _in_month(row: ProductionRow, month: int, year: int) -> bool:
    return row.date.month == month and row.date.year == year


def _month_rows(rows: list[ProductionRow], month_key: str) -> list[ProductionRow]:
    month, year = resolve_month_key(month_key)
    if month == 0:
        logger.warning("Invalid month label: %r", month_key)
        return []
    return [r for r in rows if _in_month(r, month, year)]


def compute_monthly_aggregates(rows: list[ProductionRow]) -> list[MonthlyAggregate]:
    """
    Group rows by (month, year) and carry Kenya/UK running totals forward in
    chronological order. Rebuilt from the rows on every call.
    """
    groups: dict[tuple[int, int], list[float]] = {}
    for r in rows:
        key = (r.date.year, r.date.month)
        g = groups.setdefault(key, [0.0, 0.0, 0.0])
        g[0] += r.bottles
        g[1] += r.kenya_sales
        g[2] += r.uk_sales

    out: list[MonthlyAggregate] = []
    cum_kenya = 0.0
    cum_uk = 0.0
    for (year, month) in sorted(groups):
        bottles, kenya, uk = groups[(year, month)]
        cum_kenya += kenya
        cum_uk += uk
        out.append(
            MonthlyAggregate(
                month_key=month_label(month, year),
                month=month,
                year=year,
                bottles=bottles,
                kenya=kenya,
                uk=uk,
                cumulative_kenya=cum_kenya,
                cumulative_uk=cum_uk,
                cumulative_total=cum_kenya + cum_uk,
            )
        )
    return out


def max_kenya_sales(rows: list[ProductionRow], month_key: str) -> float:
    """Total bottles in the month: the ceiling for that month's Kenya sales."""
    return sum(r.bottles for r in _month_rows(rows, month_key))


def current_kenya_sales(rows: list[ProductionRow], month_key: str) -> float:
    return sum(r.kenya_sales for r in _month_rows(rows, month_key))


def uk_sales(rows: list[ProductionRow], month_key: str) -> float:
    return sum(r.uk_sales for r in _month_rows(rows, month_key))


def set_monthly_kenya_sales(rows: list[ProductionRow], month_key: str, target_kenya_bottles) -> list[ProductionRow]:
    """
    Spread a month-level Kenya target over that month's rows.

    Every row in the month gets the same share (target / month bottles, at
    most 1), overwriting whatever share it had before. Rows outside the
    month are untouched.
    """
    month, year = resolve_month_key(month_key)
    if month == 0:
        logger.warning("Invalid month label: %r", month_key)
        return list(rows)

    month_total = sum(r.bottles for r in rows if _in_month(r, month, year))
    if month_total == 0:
        logger.info("No bottles in %s; Kenya target ignored", month_key)
        return list(rows)

    target = parse_number(target_kenya_bottles)
    if target is None:
        logger.warning("Ignoring Kenya target %r for %s: not a number", target_kenya_bottles, month_key)
        return list(rows)

    ratio = max(0.0, min(target / month_total, 1.0))

    out = [
        replace(r, kenya_sales=clamp_kenya_sales(round_half_up(r.bottles * ratio), r.bottles)) if _in_month(r, month, year) else r
        for r in rows
    ]
    logger.debug("Kenya share for %s set to %.4f", month_key, ratio)
    return out
