import logging
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from tidyclean.columns import require_columns
from tidyclean.convert import find_non_numeric
from tidyclean.errors import ColumnNameError, IngestionError

log = logging.getLogger("tidyclean.recode")


def derive_column(df: pd.DataFrame, name: str, func: Callable[[pd.DataFrame], Any]) -> pd.DataFrame:
    """Add (or replace) column ``name`` with ``func(df)``."""
    if not isinstance(name, str) or name == "":
        raise ColumnNameError(f"Derived column name must be a non-empty string, got {name!r}")
    values = func(df)
    if isinstance(values, pd.Series):
        if len(values) != len(df):
            raise ValueError(
                f"Derived column {name!r} has {len(values)} rows, table has {len(df)} rows")
        values = values.to_numpy()
    elif np.ndim(values) > 0 and len(values) != len(df):
        raise ValueError(
            f"Derived column {name!r} has {len(values)} rows, table has {len(df)} rows")
    df = df.copy()
    df[name] = values
    return df


def _numeric_source(df: pd.DataFrame, column: str) -> pd.Series:
    require_columns(df, [column])
    ser = df[column]
    if pd.api.types.is_bool_dtype(ser) or not pd.api.types.is_numeric_dtype(ser):
        bad = find_non_numeric(ser)
        raise IngestionError(
            f"expected a numeric column to recode, got dtype {ser.dtype}"
            + (f" with non-numeric tokens {bad[:10]!r}" if bad else ""),
            column=column, bad_values=bad)
    return ser


def recode_threshold(df: pd.DataFrame, column: str, threshold: float,
                     labels: Tuple[str, str] = ("low", "high"),
                     new_column: Optional[str] = None) -> pd.DataFrame:
    """Split a numeric column into two labels at ``threshold``.

    Values below the threshold get ``labels[0]``, values at or above it
    ``labels[1]``; nulls stay null. The result is a categorical column with
    the categories in label order.
    """
    if len(labels) != 2:
        raise ValueError(f"recode_threshold needs exactly two labels, got {labels!r}")
    ser = _numeric_source(df, column)
    below, above = labels
    at_or_above = (ser >= threshold).fillna(False).astype(bool).to_numpy()
    recoded = pd.Series(np.where(at_or_above, above, below), index=ser.index, dtype=object)
    recoded[ser.isna()] = None
    recoded = pd.Categorical(recoded, categories=list(labels))
    target = new_column or column
    df = df.copy()
    df[target] = recoded
    log.debug("recoded %r at %r into %r", column, threshold, target)
    return df


def recode_bins(df: pd.DataFrame, column: str, bins: Sequence[float], labels: Sequence[str],
                new_column: Optional[str] = None, right: bool = False) -> pd.DataFrame:
    """Bin a numeric column with ``pd.cut``.

    With the default ``right=False`` bins are closed on the left, matching
    ``recode_threshold`` (a value equal to an edge lands in the upper bin).
    """
    if len(labels) != len(bins) - 1:
        raise ValueError(f"{len(bins)} bin edges need {len(bins) - 1} labels, got {len(labels)}")
    ser = _numeric_source(df, column)
    target = new_column or column
    df = df.copy()
    df[target] = pd.cut(ser, bins=list(bins), labels=list(labels), right=right)
    return df
