import logging
from typing import Any, List, Tuple

import pandas as pd

from tidyclean.errors import IngestionError

log = logging.getLogger("tidyclean.convert")

TRUTHY = {"true", "yes", "y", "t", "on", "1"}
FALSY = {"false", "no", "n", "f", "off", "0"}

COERCE_TYPES = ("int", "float", "string", "bool", "category")


def _strip(val: Any) -> Any:
    if isinstance(val, str):
        return val.strip()
    return val


def _parse_numeric(ser: pd.Series) -> Tuple[pd.Series, List[str]]:
    """Parse ``ser`` as numbers, returning the result and the tokens that failed."""
    values = ser.astype(object) if isinstance(ser.dtype, pd.CategoricalDtype) else ser
    if pd.api.types.is_object_dtype(values) or pd.api.types.is_string_dtype(values):
        values = values.astype(object).map(_strip)
    converted = pd.to_numeric(values, errors="coerce")
    bad_mask = converted.isna() & ser.notna()
    bad = sorted({str(v) for v in ser[bad_mask].astype(object)})
    return converted, bad


def find_non_numeric(ser: pd.Series) -> List[str]:
    """Distinct non-null tokens in ``ser`` that do not parse as numbers."""
    return _parse_numeric(ser)[1]


def to_numeric(ser: pd.Series, strict: bool = True) -> pd.Series:
    converted, bad = _parse_numeric(ser)
    if bad:
        if strict:
            raise IngestionError(
                f"{int((converted.isna() & ser.notna()).sum())} of {len(ser)} values could "
                f"not be parsed as numbers, offending tokens: {bad[:10]!r}",
                column=ser.name, bad_values=bad)
        log.info("column %r: coerced %d non-numeric tokens %r to null",
                 ser.name, len(bad), bad[:10])
    return converted.rename(ser.name)


def category_codes_to_numeric(ser: pd.Series) -> pd.Series:
    """Position of each value in the category order, counted from 1.

    This is what you get by asking a categorical column for its numbers
    directly; it says nothing about the labels. For labels
    ``['200', '10', '3000']`` with categories in that order the result is
    ``[1, 2, 3]``.
    """
    if not isinstance(ser.dtype, pd.CategoricalDtype):
        ser = ser.astype("category")
    codes = ser.cat.codes.astype("Int64") + 1
    return codes.mask(ser.isna()).rename(ser.name)


def category_labels_to_numeric(ser: pd.Series) -> pd.Series:
    """Convert a categorical column to numbers through its text labels."""
    return to_numeric(ser.astype(object), strict=True).rename(ser.name)


def _to_bool(val: Any) -> Any:
    if isinstance(val, bool):
        return val
    if pd.isna(val):
        return pd.NA
    s = str(val).strip().lower()
    if s in TRUTHY:
        return True
    if s in FALSY:
        return False
    return pd.NA


def coerce_series(ser: pd.Series, to_type: str) -> pd.Series:
    if to_type == "int":
        num, _ = _parse_numeric(ser)
        fractional = num.notna() & (num % 1 != 0)
        if fractional.any():
            bad = sorted({str(v) for v in ser[fractional].astype(object)})
            raise IngestionError(f"non-integer values {bad[:10]!r} cannot be cast to int",
                                 column=ser.name, bad_values=bad)
        return num.astype("Int64").rename(ser.name)
    elif to_type == "float":
        num, _ = _parse_numeric(ser)
        return num.astype("float64").rename(ser.name)
    elif to_type == "string":
        return ser.astype("string")
    elif to_type == "bool":
        return ser.astype(object).map(_to_bool).astype("boolean")
    elif to_type == "category":
        return ser.astype("category")
    raise ValueError(f"Unknown type {to_type!r}, expected one of {COERCE_TYPES!r}")
