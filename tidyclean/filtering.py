import logging
from typing import Any, Callable, Iterable, Union

import numpy as np
import pandas as pd

from tidyclean.columns import require_columns
from tidyclean.errors import ColumnNameError

log = logging.getLogger("tidyclean.filtering")

Condition = Union[str, Callable[[pd.DataFrame], Any]]

EMPTY_NAME_HINT = (
    "a column with an empty name cannot be referenced in a filter expression; "
    "rename it first, e.g. rename_column(df, '', 'row_id')")


def _query_mask(df: pd.DataFrame, condition: str) -> pd.Series:
    if "``" in condition:
        raise ColumnNameError(EMPTY_NAME_HINT, column="", available=df.columns)

    # pandas cannot build a query namespace for an empty column name, so
    # evaluate against the addressable columns and align on the index.
    addressable = df.drop(columns=[""]) if "" in df.columns else df
    try:
        kept = addressable.query(condition).index
    except pd.errors.UndefinedVariableError as e:
        # query() here only sees the table's columns, never the caller's locals
        if "@" in condition:
            raise ColumnNameError(
                f"Filter {condition!r} references an undefined name: {e}; '@' local "
                "variables are not visible to filter_rows, write the value into the "
                "expression or pass a callable",
                available=df.columns) from e
        raise ColumnNameError(
            f"Filter {condition!r} references an unknown column: {e}",
            available=df.columns) from e
    except SyntaxError as e:
        raise ColumnNameError(
            f"Could not parse filter {condition!r} ({e.msg}); column names that are not "
            "Python identifiers must be wrapped in backticks",
            available=df.columns) from e
    return pd.Series(df.index.isin(kept), index=df.index)


def _callable_mask(df: pd.DataFrame, condition: Callable) -> pd.Series:
    try:
        mask = condition(df)
    except KeyError as e:
        missing = e.args[0] if e.args else None
        raise ColumnNameError(f"Filter references missing column {missing!r}",
                              column=missing, available=df.columns) from e
    if isinstance(mask, pd.Series):
        if len(mask) != len(df):
            raise ValueError(f"Filter mask has {len(mask)} rows, table has {len(df)} rows")
        mask = mask.reindex(df.index)
    else:
        mask = np.asarray(mask)
        if mask.shape != (len(df),):
            raise ValueError(f"Filter mask has shape {mask.shape}, table has {len(df)} rows")
        mask = pd.Series(mask, index=df.index)
    return mask.fillna(False).astype(bool)


def filter_rows(df: pd.DataFrame, condition: Condition) -> pd.DataFrame:
    """Keep the rows matching ``condition``.

    ``condition`` is either a ``DataFrame.query`` expression or a callable
    taking the frame and returning a boolean mask. Rows where the mask is
    null are dropped. The result has a fresh ``RangeIndex``.
    """
    df = df.reset_index(drop=True)
    if isinstance(condition, str):
        mask = _query_mask(df, condition)
    elif callable(condition):
        mask = _callable_mask(df, condition)
    else:
        raise TypeError(f"condition must be a query string or a callable, got {type(condition)!r}")
    result = df[mask].reset_index(drop=True)
    log.info("filter %r kept %d of %d rows", condition, len(result), len(df))
    return result


def as_value_list(values) -> list:
    """Wrap a scalar (a string counts as one) in a list."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        return [values]
    return list(values)


def filter_equals(df: pd.DataFrame, column: str, values: Union[Any, Iterable[Any]]) -> pd.DataFrame:
    """Keep rows whose ``column`` is one of ``values``.

    The column is looked up by string key, so an empty or otherwise
    non-identifier name works here even where a query expression can't
    reach it.
    """
    require_columns(df, [column])
    values = as_value_list(values)
    result = df[df[column].isin(values)].reset_index(drop=True)
    log.info("filter %r in %r kept %d of %d rows", column, values, len(result), len(df))
    return result
