import keyword
import logging
import re
from typing import Any, Dict, Iterable, List

import pandas as pd

from tidyclean.errors import ColumnNameError, DuplicateColumnsError

log = logging.getLogger("tidyclean.columns")


def is_addressable(name: Any) -> bool:
    """True if ``name`` can be written bare in a query expression."""
    return isinstance(name, str) and name.isidentifier() and not keyword.iskeyword(name)


def check_columns(df: pd.DataFrame) -> pd.DataFrame:
    if not df.columns.is_unique:
        dupes = df.columns[df.columns.duplicated()].unique().to_list()
        raise DuplicateColumnsError(dupes)
    return df


def require_columns(df: pd.DataFrame, columns: Iterable[Any]) -> None:
    existing = list(df.columns)
    for col in columns:
        if col not in existing:
            if col == "":
                msg = "Column with an empty name not found"
            else:
                msg = f"Column {col!r} not found"
            raise ColumnNameError(msg, column=col, available=existing)


def rename_columns(df: pd.DataFrame, mapping: Dict[str, str]) -> pd.DataFrame:
    """Rename columns by string key.

    Unlike ``df.rename(columns=...)`` this refuses to silently ignore a
    missing source column, and refuses to produce an empty or duplicate
    name. An empty source name (the header pandas reads for an unlabelled
    index column) is a valid key here.
    """
    check_columns(df)
    require_columns(df, mapping.keys())
    existing = list(df.columns)
    for old, new in mapping.items():
        if not isinstance(new, str) or new == "":
            raise ColumnNameError(
                f"Cannot rename {old!r} to {new!r}: new name must be a non-empty string",
                column=old)
        if new in existing and new not in mapping and new != old:
            raise ColumnNameError(
                f"Cannot rename {old!r} to {new!r}: a column named {new!r} already exists",
                column=new, available=existing)

    new_names = [mapping.get(col, col) for col in existing]
    if len(set(new_names)) != len(new_names):
        raise ColumnNameError(
            f"Renaming with {mapping!r} would produce duplicate column names",
            available=existing)
    renamed = df.copy()
    renamed.columns = new_names
    log.debug("renamed columns %r", mapping)
    return renamed


def rename_column(df: pd.DataFrame, old: str, new: str) -> pd.DataFrame:
    return rename_columns(df, {old: new})


def _snake_case(name: Any) -> str:
    clean = str(name).strip()
    clean = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", clean)
    clean = re.sub(r"[^\w]+", "_", clean).lower()
    clean = clean.strip("_")
    if not clean:
        return "unnamed"
    if clean[0].isdigit():
        clean = "x" + clean
    if keyword.iskeyword(clean):
        clean = clean + "_"
    return clean


def clean_column_names(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize column names to unique snake_case identifiers.

    Empty names become ``unnamed``; collisions get ``_2``, ``_3`` ...
    """
    seen = set()
    new_names: List[str] = []
    for col in df.columns:
        clean = _snake_case(col)
        base = clean
        counter = 2
        while clean in seen:
            clean = f"{base}_{counter}"
            counter += 1
        seen.add(clean)
        new_names.append(clean)
    cleaned = df.copy()
    cleaned.columns = new_names
    return cleaned
