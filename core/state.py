from __future__ import annotations

import logging
from typing import MutableMapping, Optional

from core.config import Settings
from core.services import monthly, rows as row_service
from core.services.monthly import MonthlyAggregate
from core.services.rows import ProductionRow
from core.services.summary import production_summary
from core.utils import parse_number

logger = logging.getLogger(__name__)

SESSION_KEY = "agave_estimator_state"


class EstimatorState:
    """
    The one production table of a session, plus the current global bottle
    ratio. Mutations go through the pure service functions; the returned
    table replaces the owned one and `version` is bumped.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.rows: list[ProductionRow] = row_service.generate_initial_rows(self.settings)
        self.global_ratio: float = float(self.settings.bottle_ratio)
        self.version = 0

    def bump_version(self) -> None:
        self.version += 1

    def _replace_rows(self, new_rows: list[ProductionRow]) -> bool:
        # Every mutation request bumps the version, applied or not, so widgets
        # keyed on it drop any rejected input.
        self.bump_version()
        if new_rows == self.rows:
            return False
        self.rows = new_rows
        return True

    # ---- row model ----
    def edit_field(self, row_id: int, field: str, raw_value) -> bool:
        return self._replace_rows(row_service.edit_field(self.rows, row_id, field, raw_value))

    def set_global_ratio(self, raw_ratio) -> bool:
        ratio = parse_number(raw_ratio)
        changed = self._replace_rows(row_service.set_global_ratio(self.rows, raw_ratio))
        if ratio is not None:
            self.global_ratio = ratio
        return changed

    # ---- monthly ----
    def aggregates(self) -> list[MonthlyAggregate]:
        return monthly.compute_monthly_aggregates(self.rows)

    def set_monthly_kenya_sales(self, month_key: str, target_kenya_bottles) -> bool:
        return self._replace_rows(monthly.set_monthly_kenya_sales(self.rows, month_key, target_kenya_bottles))

    def max_kenya_sales(self, month_key: str) -> float:
        return monthly.max_kenya_sales(self.rows, month_key)

    def current_kenya_sales(self, month_key: str) -> float:
        return monthly.current_kenya_sales(self.rows, month_key)

    def uk_sales(self, month_key: str) -> float:
        return monthly.uk_sales(self.rows, month_key)

    def summary(self) -> dict:
        return production_summary(self.rows)


def get_state(session: MutableMapping, settings: Optional[Settings] = None) -> EstimatorState:
    """One EstimatorState per session mapping (st.session_state in the app)."""
    state = session.get(SESSION_KEY)
    if state is None:
        state = EstimatorState(settings)
        session[SESSION_KEY] = state
        logger.info("Seeded production table with %d batches", len(state.rows))
    return state


def reset_state(session: MutableMapping, settings: Optional[Settings] = None) -> EstimatorState:
    old = session.pop(SESSION_KEY, None)
    state = get_state(session, settings)
    if old is not None:
        # Fresh widget keys for anything keyed on the version.
        state.version = old.version + 1
    return state
