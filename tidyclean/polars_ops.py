"""polars versions of the ingest, reshape, join and export operations.

Same contracts as the pandas functions in ``tidyclean.ingest``,
``tidyclean.reshape``, ``tidyclean.join`` and ``tidyclean.export``.
"""
import logging
from typing import Any, Iterable, List, Optional, Sequence, Union

import pandas as pd
import polars as pl

from tidyclean.errors import ColumnNameError, DuplicateColumnsError, IngestionError, JoinKeyError
from tidyclean.join import KeySpec, resolve_key_mapping, _check_keys

log = logging.getLogger("tidyclean.polars_ops")

# Polars uses "full" instead of "outer"
_HOW_MAP = {"outer": "full", "full": "full", "inner": "inner", "left": "left", "right": "right"}

_ROW = "__tidyclean_row"

Columns = Union[str, Sequence[str]]


def _as_list(cols: Columns) -> List[str]:
    if isinstance(cols, str):
        return [cols]
    return list(cols)


def _require(df: pl.DataFrame, columns: Iterable[str]) -> None:
    for col in columns:
        if col not in df.columns:
            raise ColumnNameError(f"Column {col!r} not found", column=col, available=df.columns)


def force_to_pandas(df_pd_or_pl) -> pd.DataFrame:
    if isinstance(df_pd_or_pl, pd.DataFrame):
        return df_pd_or_pl
    if isinstance(df_pd_or_pl, pl.DataFrame):
        return df_pd_or_pl.to_pandas()
    raise TypeError("unexpected type for dataframe, got %r" % (type(df_pd_or_pl)))


def read_csv_strings(path, na_values: Iterable[Any] = ("", "NA"), sep: str = ",") -> pl.DataFrame:
    na_values = [str(v) for v in na_values]
    try:
        df = pl.read_csv(
            path, separator=sep, null_values=[v for v in na_values if v != ""],
            empty_string_is_null="" in na_values, infer_schema_length=None)
    except FileNotFoundError as e:
        raise IngestionError("file not found", path=str(path)) from e
    except pl.exceptions.NoDataError as e:
        raise IngestionError("file is empty, expected a header row", path=str(path)) from e
    except pl.exceptions.ComputeError as e:
        raise IngestionError(f"could not parse delimited text: {e}", path=str(path)) from e
    if len(set(df.columns)) != len(df.columns):
        raise DuplicateColumnsError(sorted({c for c in df.columns if df.columns.count(c) > 1}))
    log.debug("read %s: %d rows, null tokens %r", path, df.height, na_values)
    return df


def wide_to_long(df: pl.DataFrame, id_columns: Columns,
                 value_columns: Optional[Columns] = None,
                 names_to: str = "name", values_to: str = "value") -> pl.DataFrame:
    id_columns = _as_list(id_columns)
    if value_columns is None:
        value_columns = [c for c in df.columns if c not in id_columns]
    else:
        value_columns = _as_list(value_columns)
    _require(df, id_columns + value_columns)
    if not value_columns:
        raise ColumnNameError("No value columns left to gather", available=df.columns)
    if names_to == values_to:
        raise ColumnNameError(f"names_to and values_to must differ, both are {names_to!r}")
    for new_col in (names_to, values_to):
        if new_col in id_columns:
            raise ColumnNameError(f"Output column {new_col!r} collides with an id column",
                                  column=new_col, available=id_columns)

    # unpivot stacks column by column; sort back to row-major order
    return (
        df.with_row_index(_ROW)
        .unpivot(on=value_columns, index=[_ROW] + id_columns,
                 variable_name=names_to, value_name=values_to)
        .sort(_ROW, maintain_order=True)
        .drop(_ROW)
    )


def long_to_wide(df: pl.DataFrame, id_columns: Columns,
                 names_from: str = "name", values_from: str = "value") -> pl.DataFrame:
    id_columns = _as_list(id_columns)
    _require(df, id_columns + [names_from, values_from])
    cell_keys = df.select(id_columns + [names_from])
    dupes = cell_keys.height - cell_keys.unique().height
    if dupes:
        raise ValueError(
            f"{dupes} rows repeat an ({', '.join(id_columns)}, {names_from}) "
            "combination; long_to_wide needs exactly one value per cell")
    return df.pivot(on=names_from, index=id_columns, values=values_from,
                    aggregate_function=None)


def join_tables(left: pl.DataFrame, right: pl.DataFrame, on: KeySpec = None,
                how: str = "inner", suffix: str = "_y") -> pl.DataFrame:
    if how not in _HOW_MAP:
        raise ValueError(f"Unknown join type {how!r}, expected one of inner, left, right, full")
    mapping = resolve_key_mapping(left, right, on)
    _check_keys(left, right, mapping)

    rename = {r: l for l, r in mapping.items() if r != l}
    collisions = [l for l in rename.values() if l in right.columns and l not in rename]
    if collisions:
        raise JoinKeyError(
            f"Cannot align right key(s) to {collisions!r}: the right table already has a "
            "non-key column with that name; rename it first",
            left.columns, right.columns)
    right_aligned = right.rename(rename) if rename else right
    keys = list(mapping)

    for side, df in (("left", left), ("right", right_aligned)):
        dupes = df.height - df.select(keys).unique().height
        if dupes:
            log.warning("%d rows of the %s table repeat a key on %r; "
                        "the joined table can have more rows than either input", dupes, side, keys)

    try:
        merged = left.join(right_aligned, on=keys, how=_HOW_MAP[how], suffix=suffix,
                           coalesce=True)
    except (pl.exceptions.ComputeError, pl.exceptions.SchemaError) as e:
        raise JoinKeyError(f"Could not join on {mapping!r}: {e}", left.columns, right.columns) from e
    log.info("%s join on %r: %d x %d rows -> %d rows", how, mapping, left.height, right.height,
             merged.height)
    return merged


def write_csv(df: pl.DataFrame, path, sep: str = ","):
    df.write_csv(path, separator=sep, null_value="")
    log.info("wrote %d rows x %d columns to %s", df.height, df.width, path)
    return path
