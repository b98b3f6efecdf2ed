from __future__ import annotations

import pandas as pd

from core.services.monthly import MonthlyAggregate
from core.services.rows import ProductionRow
from core.utils import format_uk_date

# Editor column label -> ProductionRow field, in display order.
COLUMN_FIELDS = {
    "Batch": "batch",
    "Date": "date",
    "Agave pieces": "agave",
    "Fermented liquid": "fermented_liquid",
    "Bottles ratio": "bottle_ratio",
    "Bottles": "bottles",
    "Kenya sales": "kenya_sales",
}


def rows_to_frame(rows: list[ProductionRow]) -> pd.DataFrame:
    """Editor frame indexed by row id, with the date as day/month/year text."""
    records = []
    for r in rows:
        rec = {label: getattr(r, field) for label, field in COLUMN_FIELDS.items()}
        rec["Date"] = format_uk_date(r.date)
        records.append(rec)
    df = pd.DataFrame(records, columns=list(COLUMN_FIELDS), index=pd.Index([r.id for r in rows], name="id"))
    return df


def aggregates_to_frame(aggregates: list[MonthlyAggregate]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "Month": a.month_key,
                "Bottles": a.bottles,
                "Kenya": a.kenya,
                "UK": a.uk,
                "Kenya (cumulative)": a.cumulative_kenya,
                "UK (cumulative)": a.cumulative_uk,
                "Total (cumulative)": a.cumulative_total,
            }
            for a in aggregates
        ],
        columns=["Month", "Bottles", "Kenya", "UK", "Kenya (cumulative)", "UK (cumulative)", "Total (cumulative)"],
    )
    return df.set_index("Month")


def _same(a, b) -> bool:
    if pd.isna(a) and pd.isna(b):
        return True
    if pd.isna(a) or pd.isna(b):
        return False
    return a == b


def _as_text(v) -> str:
    return "" if pd.isna(v) else str(v)


def diff_edits(before: pd.DataFrame, after: pd.DataFrame) -> list[tuple[int, str, str]]:
    """
    Changed cells between two editor frames as (row_id, field, raw_text),
    row by row in column order. Rows missing from `after` are skipped.
    """
    edits: list[tuple[int, str, str]] = []
    for row_id in before.index:
        if row_id not in after.index:
            continue
        for label, field in COLUMN_FIELDS.items():
            old = before.at[row_id, label]
            new = after.at[row_id, label]
            if not _same(old, new):
                edits.append((int(row_id), field, _as_text(new)))
    return edits
