from __future__ import annotations

from core.services.monthly import MonthlyAggregate
from core.services.rows import ProductionRow
from core.utils import round_half_up, safe_div


def production_summary(rows: list[ProductionRow]) -> dict:
    n = len(rows)
    return {
        "total_agave": sum(r.agave for r in rows),
        "total_fermented_liquid": sum(r.fermented_liquid for r in rows),
        "total_bottles": sum(r.bottles for r in rows),
        "average_bottle_ratio": safe_div(sum(r.bottle_ratio for r in rows), n),
        "total_kenya_sales": sum(r.kenya_sales for r in rows),
        "total_uk_sales": sum(r.uk_sales for r in rows),
    }


def kenya_percentage(agg: MonthlyAggregate) -> int:
    """Whole-number Kenya share of a month's bottles (0 for an empty month)."""
    if agg.bottles <= 0:
        return 0
    return round_half_up(agg.kenya / agg.bottles * 100)
