import logging
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from traffic_fatalities import settings

log = logging.getLogger(__name__)


class SchemaError(ValueError):
    """Source table lacks one or more required fields."""


class NormalizedTables(NamedTuple):
    full: pd.DataFrame
    complete: pd.DataFrame


# --- helpers ---

def _require(df: pd.DataFrame, required: Sequence[str]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise SchemaError(f"table is missing required columns: {missing}. Found: {list(df.columns)}")

def _as_frame(raw: Union[pd.DataFrame, Sequence[Mapping[str, Any]]]) -> pd.DataFrame:
    if isinstance(raw, pd.DataFrame):
        return raw.copy()
    records = list(raw)
    if not records:
        return pd.DataFrame(columns=settings.NORMALIZE_REQUIRED)
    return pd.DataFrame.from_records(records)


def load_records(path) -> pd.DataFrame:
    """
    Load the fatalities CSV and normalize required column names
    (case-insensitive, surrounding whitespace ignored):
      date, time, victim_type, gender, age, child_adult, charges

    Text cells are kept verbatim (blank stays "", a lone space stays " ");
    only `age` is coerced to numeric.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    cols = {c.strip().lower(): c for c in df.columns}
    missing = [r for r in settings.REQUIRED_COLUMNS if r not in cols]
    if missing:
        raise SchemaError(f"CSV is missing required columns: {missing}. Found: {list(df.columns)}")
    df = df.rename(columns={cols[r]: r for r in settings.REQUIRED_COLUMNS})
    df["age"] = pd.to_numeric(df["age"].str.strip(), errors="coerce")
    log.info("loaded %d records from %s", len(df), path)
    return df


def cleanse_victim_type(values: pd.Series, unknown: str = settings.UNKNOWN_LABEL) -> pd.Series:
    """
    Collapse the empty sentinels ("" and " ") and missing cells into `unknown`.
    Other whitespace ("  ", "\\t") is kept as its own category.
    """
    # categorical input would reject the new label
    values = values.astype(object)
    empty = values.isna() | values.isin(settings.EMPTY_SENTINELS)
    return values.where(~empty, unknown)


def derive_category_order(values: pd.Series) -> Tuple[Any, ...]:
    """
    Distinct values ordered by ascending frequency (least common first).
    Equal counts keep first-seen order (sorted() is stable over pd.unique order).
    """
    counts = values.value_counts()
    return tuple(sorted(pd.unique(values), key=lambda v: counts[v]))


def category_order(df: pd.DataFrame) -> Tuple[Any, ...]:
    """The victim-type order attached to a normalized table."""
    return tuple(df["victim_type_category"].cat.categories)


def parse_timestamps(
    date: pd.Series,
    time: pd.Series,
    tz: str = settings.TIMEZONE,
    fmt: str = settings.DATETIME_FORMAT,
) -> pd.Series:
    """
    Join date and time with one space and parse as local wall-clock time in `tz`.
    Anything that does not match `fmt` (including blanks) becomes NaT.
    """
    joined = date.fillna("").astype(str) + " " + time.fillna("").astype(str)
    naive = pd.to_datetime(joined, format=fmt, errors="coerce")
    # repeated autumn hour -> DST reading; spring gap -> shifted forward
    return naive.dt.tz_localize(
        tz,
        ambiguous=np.ones(len(naive), dtype=bool),
        nonexistent="shift_forward",
    )


def normalize(
    raw: Union[pd.DataFrame, Sequence[Mapping[str, Any]]],
    *,
    tz: Optional[str] = None,
    fmt: Optional[str] = None,
) -> NormalizedTables:
    """
    Return (full, complete):
      full     - every raw record, victim_type cleansed, plus
                 victim_type_category (ordered by ascending frequency) and
                 timestamp (tz-aware, NaT when unparseable)
      complete - the rows of `full` that have a timestamp, same order
    The input is never modified.
    """
    out = _as_frame(raw)
    _require(out, settings.NORMALIZE_REQUIRED)

    out["victim_type"] = cleanse_victim_type(out["victim_type"])
    order = derive_category_order(out["victim_type"])
    out["victim_type_category"] = pd.Categorical(out["victim_type"], categories=list(order), ordered=True)

    out["timestamp"] = parse_timestamps(
        out["date"], out["time"],
        tz=tz or settings.TIMEZONE,
        fmt=fmt or settings.DATETIME_FORMAT,
    )

    complete = out.loc[out["timestamp"].notna()].copy()
    log.info(
        "normalized %d records: %d with timestamp, %d without",
        len(out), len(complete), len(out) - len(complete),
    )
    return NormalizedTables(out, complete)


def enrich(df: pd.DataFrame) -> pd.DataFrame:
    """
    Add chart features to a normalized table:
      year, month, dow (0=Mon), hour as nullable ints (missing without timestamp),
      gender_label (trimmed, title-cased, blank -> "Unknown")
    """
    _require(df, ["timestamp", "gender"])
    out = df.copy()

    ts = out["timestamp"].dt
    out["year"] = ts.year.astype("Int16")
    out["month"] = ts.month.astype("UInt8")
    out["dow"] = ts.dayofweek.astype("UInt8")
    out["hour"] = ts.hour.astype("UInt8")

    g = out["gender"].fillna("").astype(str).str.strip().str.title()
    out["gender_label"] = g.where(g != "", "Unknown")
    return out
