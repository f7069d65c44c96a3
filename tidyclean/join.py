import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd

from tidyclean.columns import check_columns
from tidyclean.errors import JoinKeyError

log = logging.getLogger("tidyclean.join")

# pandas calls the full join "outer"
JOIN_TYPES = {"inner": "inner", "left": "left", "right": "right", "full": "outer", "outer": "outer"}

KeySpec = Union[None, str, Sequence[str], Dict[str, str]]


def resolve_key_mapping(left: pd.DataFrame, right: pd.DataFrame, on: KeySpec) -> Dict[str, str]:
    """Turn ``on`` into an explicit ``{left_column: right_column}`` mapping.

    With ``on=None`` the shared column names are used; when there are
    none this raises instead of falling back to a cross join.
    """
    if on is None:
        shared = [c for c in left.columns if c in right.columns]
        if not shared:
            raise JoinKeyError(
                "No key mapping given and the tables share no column name; "
                "pass on={'left_key': 'right_key'}",
                left.columns, right.columns)
        log.info("no key mapping given, joining on shared columns %r", shared)
        return {c: c for c in shared}
    if isinstance(on, str):
        return {on: on}
    if isinstance(on, dict):
        if not on:
            raise JoinKeyError("Key mapping is empty", left.columns, right.columns)
        return dict(on)
    on = list(on)
    if not on:
        raise JoinKeyError("Key list is empty", left.columns, right.columns)
    return {c: c for c in on}


def _check_keys(left: pd.DataFrame, right: pd.DataFrame, mapping: Dict[str, str]) -> None:
    missing_left = [k for k in mapping if k not in left.columns]
    if missing_left:
        raise JoinKeyError(f"Key column(s) {missing_left!r} not found in left table",
                           left.columns, right.columns)
    missing_right = [k for k in mapping.values() if k not in right.columns]
    if missing_right:
        raise JoinKeyError(f"Key column(s) {missing_right!r} not found in right table",
                           left.columns, right.columns)


def _align_right_keys(right: pd.DataFrame, mapping: Dict[str, str],
                      left_columns: Sequence[str]) -> pd.DataFrame:
    rename = {r: l for l, r in mapping.items() if r != l}
    if not rename:
        return right
    collisions = [l for l in rename.values() if l in right.columns and l not in rename]
    if collisions:
        raise JoinKeyError(
            f"Cannot align right key(s) to {collisions!r}: the right table already has a "
            "non-key column with that name; rename it first",
            left_columns, right.columns)
    return right.rename(columns=rename)


def _duplicate_key_count(df: pd.DataFrame, keys: List[str]) -> int:
    return int(df.duplicated(subset=keys).sum())


def _null_key_rows(left: pd.DataFrame, right: pd.DataFrame, keys: List[str], how: str,
                   suffixes: Tuple[str, str]) -> List[pd.DataFrame]:
    """Rows with a null key, renamed to the merged layout, that ``how`` keeps unmatched."""
    overlap = [c for c in left.columns if c in right.columns and c not in keys]
    kept = []
    if how in ("left", "full", "outer"):
        kept.append(left[left[keys].isna().any(axis=1)].rename(
            columns={c: c + suffixes[0] for c in overlap}))
    if how in ("right", "full", "outer"):
        kept.append(right[right[keys].isna().any(axis=1)].rename(
            columns={c: c + suffixes[1] for c in overlap}))
    return [part for part in kept if len(part)]


def join_tables(left: pd.DataFrame, right: pd.DataFrame, on: KeySpec = None,
                how: str = "inner", suffixes: Tuple[str, str] = ("_x", "_y")) -> pd.DataFrame:
    """Join two tables on an explicit key mapping.

    Parameters
    ----------
    left, right : pd.DataFrame
        The tables to combine.
    on : str, list[str], dict[str, str] or None
        Shared key name(s), or a ``{left_name: right_name}`` mapping for
        keys that are named differently in the two tables. ``None`` joins
        on the shared column names and fails if there are none.
    how : str
        'inner', 'left', 'right' or 'full' ('outer' is accepted too).
    suffixes : tuple[str, str]
        Appended to non-key columns present in both tables.

    Returns
    -------
    pd.DataFrame
        One key column per mapping entry, named as in ``left``, followed
        by the remaining columns of ``left`` and ``right``. Unmatched rows
        kept by the join policy carry nulls on the side that had no match.
        A null key never matches, not even another null key.
    """
    if how not in JOIN_TYPES:
        raise ValueError(f"Unknown join type {how!r}, expected one of inner, left, right, full")
    check_columns(left)
    check_columns(right)
    mapping = resolve_key_mapping(left, right, on)
    _check_keys(left, right, mapping)
    right_aligned = _align_right_keys(right, mapping, left.columns)
    keys = list(mapping)

    for side, df in (("left", left), ("right", right_aligned)):
        dupes = _duplicate_key_count(df, keys)
        if dupes:
            log.warning("%d rows of the %s table repeat a key on %r; "
                        "the joined table can have more rows than either input", dupes, side, keys)

    # pandas pairs null keys with each other, so those rows bypass the merge
    unmatched = _null_key_rows(left, right_aligned, keys, how, suffixes)
    left_keyed = left.dropna(subset=keys)
    right_keyed = right_aligned.dropna(subset=keys)
    if len(left_keyed) != len(left) or len(right_keyed) != len(right_aligned):
        log.warning("%d left and %d right rows have a null key on %r and match nothing",
                    len(left) - len(left_keyed), len(right_aligned) - len(right_keyed), keys)

    try:
        merged = pd.merge(left_keyed, right_keyed, on=keys, how=JOIN_TYPES[how], suffixes=suffixes)
    except ValueError as e:
        dtypes = {k: (str(left[k].dtype), str(right_aligned[k].dtype)) for k in keys}
        raise JoinKeyError(f"Could not join on {mapping!r} (key dtypes {dtypes!r}): {e}",
                           left.columns, right.columns) from e
    if unmatched:
        merged = pd.concat([merged] + unmatched, ignore_index=True)[list(merged.columns)]

    log.info("%s join on %r: %d x %d rows -> %d rows", how, mapping, len(left), len(right), len(merged))
    return merged


def join_summary(left: pd.DataFrame, right: pd.DataFrame, on: KeySpec = None) -> Dict[str, int]:
    """Count matched and unmatched distinct non-null keys before joining."""
    mapping = resolve_key_mapping(left, right, on)
    _check_keys(left, right, mapping)
    left_keys = set(left[list(mapping.keys())].dropna().itertuples(index=False, name=None))
    right_keys = set(right[list(mapping.values())].dropna().itertuples(index=False, name=None))
    return {
        "matched": len(left_keys & right_keys),
        "left_only": len(left_keys - right_keys),
        "right_only": len(right_keys - left_keys),
    }
