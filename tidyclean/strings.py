import re
import unicodedata
from typing import Any, Dict, Iterable, Optional, Sequence

import pandas as pd

from tidyclean.columns import require_columns

MISSING_STRINGS = frozenset({
    "", " ", "N/A", "n/a", "NA", "na", "NULL", "null", "Null",
    "None", "none", "NONE", "-", "--", ".", "?", "#N/A", "NaN", "nan",
})

_ZERO_WIDTH = re.compile(r"[\u200b\u200c\u200d\ufeff\u00ad]")
_WHITESPACE = re.compile(r"[\s\xa0]+")

_CASE_FUNCS = {
    "lower": str.lower,
    "upper": str.upper,
    "title": str.title,
}


def normalize_whitespace(value: Any) -> Any:
    """Strip zero-width characters, normalize to NFC, collapse whitespace runs."""
    if not isinstance(value, str):
        return value
    value = _ZERO_WIDTH.sub("", value)
    value = unicodedata.normalize("NFC", value)
    value = _WHITESPACE.sub(" ", value)
    return value.strip()


def _text_columns(df: pd.DataFrame) -> list:
    return [col for col in df.columns
            if pd.api.types.is_object_dtype(df[col]) or pd.api.types.is_string_dtype(df[col])]


def clean_strings(df: pd.DataFrame, columns: Optional[Sequence[str]] = None,
                  case: Optional[str] = None) -> pd.DataFrame:
    if case is not None and case not in _CASE_FUNCS:
        raise ValueError(f"Unknown case {case!r}, expected one of {sorted(_CASE_FUNCS)!r}")
    if columns is None:
        columns = _text_columns(df)
    else:
        require_columns(df, columns)
    case_func = _CASE_FUNCS.get(case)

    def _clean(val):
        val = normalize_whitespace(val)
        if case_func is not None and isinstance(val, str):
            val = case_func(val)
        return val

    df = df.copy()
    for col in columns:
        if isinstance(df[col].dtype, pd.CategoricalDtype):
            df[col] = df[col].astype(object).map(_clean).astype("category")
        else:
            df[col] = df[col].map(_clean)
    return df


def coerce_missing(df: pd.DataFrame, columns: Optional[Sequence[str]] = None,
                   tokens: Iterable[str] = MISSING_STRINGS) -> pd.DataFrame:
    """Replace missing-value spellings with null after the fact."""
    tokens = set(tokens)
    if columns is None:
        columns = _text_columns(df)
    else:
        require_columns(df, columns)

    def _coerce(val):
        if isinstance(val, str) and val.strip() in tokens:
            return None
        return val

    df = df.copy()
    for col in columns:
        df[col] = df[col].astype(object).map(_coerce)
    return df


def replace_values(df: pd.DataFrame, column: str, mapping: Dict[Any, Any]) -> pd.DataFrame:
    require_columns(df, [column])
    df = df.copy()
    df[column] = df[column].replace(mapping)
    return df
