from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional

import streamlit as st

from core.utils import parse_uk_date

ENV_PREFIX = "AGAVE_ESTIMATOR_"

# Derivation constants, not user settings.
LIQUID_PER_AGAVE = 35
DEFAULT_KENYA_SHARE = 0.2

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    bottle_ratio: float = 2.0
    seed_batch: int = 20
    seed_date: date = date(2025, 3, 7)
    seed_agave: float = 65.0
    agave_step: float = 5.0
    agave_cap: float = 100.0
    cadence_weeks: int = 3
    row_count: int = 10
    log_level: str = "INFO"
    log_dir: Optional[str] = None


def _env(environ: Mapping[str, str], name: str) -> Optional[str]:
    v = environ.get(ENV_PREFIX + name)
    if v is None or not str(v).strip():
        return None
    return str(v).strip()


def _as_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _env(environ, name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r (not a number)", ENV_PREFIX, name, raw)
        return default


def _as_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _env(environ, name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s%s=%r (not an integer)", ENV_PREFIX, name, raw)
        return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    # Priority order:
    # 1) Environment variables (AGAVE_ESTIMATOR_*)
    # 2) Defaults
    environ = os.environ if environ is None else environ
    defaults = Settings()

    seed_date = defaults.seed_date
    raw_date = _env(environ, "SEED_DATE")
    if raw_date is not None:
        parsed = parse_uk_date(raw_date)
        if parsed is None:
            logger.warning("Ignoring %sSEED_DATE=%r (expected day/month/year)", ENV_PREFIX, raw_date)
        else:
            seed_date = parsed

    bottle_ratio = _as_float(environ, "BOTTLE_RATIO", defaults.bottle_ratio)
    if not math.isfinite(bottle_ratio) or bottle_ratio <= 0:
        logger.warning("Ignoring %sBOTTLE_RATIO=%r (must be > 0)", ENV_PREFIX, bottle_ratio)
        bottle_ratio = defaults.bottle_ratio

    return Settings(
        bottle_ratio=bottle_ratio,
        seed_batch=_as_int(environ, "SEED_BATCH", defaults.seed_batch),
        seed_date=seed_date,
        seed_agave=_as_float(environ, "SEED_AGAVE", defaults.seed_agave),
        agave_step=_as_float(environ, "AGAVE_STEP", defaults.agave_step),
        agave_cap=_as_float(environ, "AGAVE_CAP", defaults.agave_cap),
        cadence_weeks=_as_int(environ, "CADENCE_WEEKS", defaults.cadence_weeks),
        row_count=_as_int(environ, "ROW_COUNT", defaults.row_count),
        log_level=(_env(environ, "LOG_LEVEL") or defaults.log_level).upper(),
        log_dir=_env(environ, "LOG_DIR"),
    )


@st.cache_resource
def get_settings() -> Settings:
    return load_settings()
