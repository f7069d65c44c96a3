"""Wide <-> tall reshaping.

``wide_to_long`` gathers a set of value columns into a name column and a
value column; ``long_to_wide`` spreads them back out. Both are thin
wrappers over ``DataFrame.melt`` and ``DataFrame.pivot`` that validate
column names up front and keep row/column order stable.
"""
import logging
from typing import List, Optional, Sequence, Union

import pandas as pd

from tidyclean.columns import check_columns, require_columns
from tidyclean.errors import ColumnNameError

log = logging.getLogger("tidyclean.reshape")

Columns = Union[str, Sequence[str]]


def _as_list(cols: Columns) -> List[str]:
    if isinstance(cols, str):
        return [cols]
    return list(cols)


def wide_to_long(df: pd.DataFrame, id_columns: Columns,
                 value_columns: Optional[Columns] = None,
                 names_to: str = "name", values_to: str = "value") -> pd.DataFrame:
    """Gather ``value_columns`` into ``names_to``/``values_to`` columns.

    Produces one row per (input row, value column) pair, ordered by input
    row and then by value column. ``value_columns`` defaults to every
    column not in ``id_columns``.

    >>> wide = pd.DataFrame({'Round': [1, 2], 'PlayerA': [10, 11], 'PlayerB': [12, 13]})
    >>> wide_to_long(wide, 'Round', names_to='Player', values_to='Time')
       Round   Player  Time
    0      1  PlayerA    10
    1      1  PlayerB    12
    2      2  PlayerA    11
    3      2  PlayerB    13
    """
    check_columns(df)
    id_columns = _as_list(id_columns)
    if value_columns is None:
        value_columns = [c for c in df.columns if c not in id_columns]
    else:
        value_columns = _as_list(value_columns)
    require_columns(df, id_columns + value_columns)

    if not value_columns:
        raise ColumnNameError("No value columns left to gather", available=df.columns)
    if names_to == values_to:
        raise ColumnNameError(f"names_to and values_to must differ, both are {names_to!r}")
    for new_col in (names_to, values_to):
        if new_col in id_columns:
            raise ColumnNameError(
                f"Output column {new_col!r} collides with an id column",
                column=new_col, available=id_columns)

    melted = df.reset_index(drop=True).melt(
        id_vars=id_columns, value_vars=value_columns,
        var_name=names_to, value_name=values_to, ignore_index=False)
    melted = melted.sort_index(kind="stable").reset_index(drop=True)
    log.debug("wide_to_long: %d rows x %d value columns -> %d rows",
              len(df), len(value_columns), len(melted))
    return melted


def long_to_wide(df: pd.DataFrame, id_columns: Columns,
                 names_from: str = "name", values_from: str = "value") -> pd.DataFrame:
    """Spread ``names_from``/``values_from`` back into one column per name.

    Each (id, name) combination must appear once. Rows keep the order in
    which their ids first appear, new columns the order in which their
    names first appear.
    """
    check_columns(df)
    id_columns = _as_list(id_columns)
    require_columns(df, id_columns + [names_from, values_from])

    dupes = df.duplicated(subset=id_columns + [names_from])
    if dupes.any():
        raise ValueError(
            f"{int(dupes.sum())} rows repeat an ({', '.join(id_columns)}, {names_from}) "
            "combination; long_to_wide needs exactly one value per cell")

    index = id_columns[0] if len(id_columns) == 1 else id_columns
    wide = df.pivot(index=index, columns=names_from, values=values_from)

    names = df[names_from].drop_duplicates().to_list()
    id_rows = df[id_columns].drop_duplicates()
    if len(id_columns) == 1:
        row_order = pd.Index(id_rows[id_columns[0]], name=id_columns[0])
    else:
        row_order = pd.MultiIndex.from_frame(id_rows)
    wide = wide.reindex(index=row_order, columns=names)

    wide.columns.name = None
    wide = wide.reset_index()
    log.debug("long_to_wide: %d rows -> %d rows x %d columns", len(df), len(wide), len(names))
    return wide
