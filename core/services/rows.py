from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Optional

from core.config import DEFAULT_KENYA_SHARE, LIQUID_PER_AGAVE, Settings
from core.utils import parse_integer, parse_number, parse_uk_date, round_half_up, safe_div

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "batch",
    "date",
    "agave",
    "fermented_liquid",
    "bottle_ratio",
    "bottles",
    "kenya_sales",
)


@dataclass(frozen=True)
class ProductionRow:
    id: int
    batch: int
    date: date
    agave: float
    fermented_liquid: float
    bottle_ratio: float
    bottles: float
    kenya_sales: float

    @property
    def uk_sales(self) -> float:
        return self.bottles - self.kenya_sales


def clamp_kenya_sales(kenya_sales: float, bottles: float) -> float:
    # Kenya sales stay within [0, bottles]; a negative bottle count pins it to 0.
    return max(0.0, min(float(kenya_sales), float(bottles))) if bottles > 0 else 0.0


def rescale_kenya_sales(prior_kenya: float, prior_bottles: float, new_bottles: float) -> float:
    """
    Keep a row's Kenya share when its bottle count changes.

    The share is prior_kenya / prior_bottles (20% when there were no bottles);
    the result is rounded half-up and clamped to [0, new_bottles].
    """
    share = safe_div(prior_kenya, prior_bottles) if prior_bottles > 0 else DEFAULT_KENYA_SHARE
    return clamp_kenya_sales(round_half_up(new_bottles * share), new_bottles)


def generate_initial_rows(settings: Optional[Settings] = None) -> list[ProductionRow]:
    """
    Seed table: one batch every `cadence_weeks` weeks, agave growing by
    `agave_step` per batch up to `agave_cap`, Kenya sales at 20% of bottles.
    """
    settings = settings or Settings()

    rows: list[ProductionRow] = []
    batch = int(settings.seed_batch)
    current = settings.seed_date
    agave = float(settings.seed_agave)
    ratio = float(settings.bottle_ratio)

    for i in range(int(settings.row_count)):
        bottles = agave * ratio
        rows.append(
            ProductionRow(
                id=i,
                batch=batch,
                date=current,
                agave=agave,
                fermented_liquid=agave * LIQUID_PER_AGAVE,
                bottle_ratio=ratio,
                bottles=bottles,
                kenya_sales=float(round_half_up(bottles * DEFAULT_KENYA_SHARE)),
            )
        )
        batch += 1
        current = current + timedelta(weeks=int(settings.cadence_weeks))
        agave = min(agave + float(settings.agave_step), float(settings.agave_cap))

    return rows


def _apply_edit(row: ProductionRow, field: str, raw_value) -> ProductionRow:
    if field == "date":
        d = parse_uk_date(raw_value)
        if d is None:
            logger.warning("Ignoring date edit on row %s: %r is not day/month/year", row.id, raw_value)
            return row
        return replace(row, date=d)

    if field == "batch":
        batch = parse_integer(raw_value)
        if batch is None:
            logger.warning("Ignoring batch edit on row %s: %r is not a number", row.id, raw_value)
            return row
        return replace(row, batch=batch)

    v = parse_number(raw_value)
    if v is None:
        logger.warning("Ignoring %s edit on row %s: %r is not a number", field, row.id, raw_value)
        return row

    if field == "agave":
        bottles = v * row.bottle_ratio
        return replace(
            row,
            agave=v,
            fermented_liquid=v * LIQUID_PER_AGAVE,
            bottles=bottles,
            kenya_sales=rescale_kenya_sales(row.kenya_sales, row.bottles, bottles),
        )

    if field == "bottle_ratio":
        bottles = row.agave * v
        return replace(
            row,
            bottle_ratio=v,
            bottles=bottles,
            kenya_sales=rescale_kenya_sales(row.kenya_sales, row.bottles, bottles),
        )

    if field == "kenya_sales":
        return replace(row, kenya_sales=clamp_kenya_sales(v, row.bottles))

    # fermented_liquid / bottles typed directly are manual overrides: stored
    # as-is, nothing else is re-derived.
    return replace(row, **{field: v})


def edit_field(rows: list[ProductionRow], row_id: int, field: str, raw_value) -> list[ProductionRow]:
    """
    Returns a new row list with one field of one row edited and its dependent
    fields recomputed. Unparseable input leaves the row unchanged.
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown field: {field!r}")

    out: list[ProductionRow] = []
    for row in rows:
        if row.id == row_id:
            updated = _apply_edit(row, field, raw_value)
            if updated is not row:
                logger.debug("Row %s: %s set from %r", row_id, field, raw_value)
            out.append(updated)
        else:
            out.append(row)
    return out


def set_global_ratio(rows: list[ProductionRow], raw_ratio) -> list[ProductionRow]:
    """Apply one bottle ratio to every row, keeping each row's Kenya share."""
    ratio = parse_number(raw_ratio)
    if ratio is None:
        logger.warning("Ignoring global bottle ratio %r: not a finite number", raw_ratio)
        return list(rows)

    out: list[ProductionRow] = []
    for row in rows:
        bottles = row.agave * ratio
        out.append(
            replace(
                row,
                bottle_ratio=ratio,
                bottles=bottles,
                kenya_sales=rescale_kenya_sales(row.kenya_sales, row.bottles, bottles),
            )
        )
    logger.debug("Global bottle ratio set to %s on %d rows", ratio, len(out))
    return out
