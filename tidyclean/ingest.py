"""CSV ingestion.

Two readers with deliberately different typing behaviour:

``read_csv_categorical`` reads every field literally and turns each text
column into a pandas ``category``. A numeric column with one stray token
("NA", "n/a", an empty field) silently becomes a categorical column whose
categories are the sorted labels, which is the classic source of wrong
numbers when someone later asks for the category codes.

``read_csv_strings`` maps an explicit set of tokens to null and leaves text
columns as plain strings, so numeric columns stay numeric-or-null.
"""
import logging
import os
from typing import Any, Iterable, List

import pandas as pd

from tidyclean.errors import DuplicateColumnsError, IngestionError

log = logging.getLogger("tidyclean.ingest")

DEFAULT_NA_VALUES = ("", "NA")


def _read(path, **kwargs) -> pd.DataFrame:
    try:
        return pd.read_csv(path, **kwargs)
    except FileNotFoundError as e:
        raise IngestionError("file not found", path=str(path)) from e
    except pd.errors.EmptyDataError as e:
        raise IngestionError("file is empty, expected a header row", path=str(path)) from e
    except pd.errors.ParserError as e:
        raise IngestionError(f"could not parse delimited text: {e}", path=str(path)) from e
    except UnicodeDecodeError as e:
        raise IngestionError(f"could not decode file: {e}", path=str(path)) from e


def _raw_header(path, sep: str) -> List[str]:
    hdr = _read(path, sep=sep, header=None, nrows=1, dtype=str,
                keep_default_na=False, na_filter=False)
    return hdr.iloc[0].to_list()


def _fix_header(df: pd.DataFrame, path, sep: str) -> pd.DataFrame:
    """Restore header names exactly as written in the file.

    pandas replaces an empty header cell with ``Unnamed: N`` and mangles
    repeated names into ``name.1``. Repeated names are rejected; a single
    empty name is restored to ``""`` so it can be renamed explicitly.
    """
    raw = _raw_header(path, sep)
    named = [h for h in raw if h != ""]
    dupes = sorted({h for h in named if named.count(h) > 1})
    if dupes:
        raise DuplicateColumnsError(dupes)

    empty_positions = [i for i, h in enumerate(raw) if h == ""]
    if len(empty_positions) == 1:
        cols = list(df.columns)
        cols[empty_positions[0]] = ""
        df.columns = cols
    elif len(empty_positions) > 1:
        log.warning("%s has %d empty header cells, keeping placeholder names %r",
                    path, len(empty_positions),
                    [df.columns[i] for i in empty_positions])
    return df


def _is_text(ser: pd.Series) -> bool:
    return pd.api.types.is_object_dtype(ser) or pd.api.types.is_string_dtype(ser)


def read_csv_categorical(path, sep: str = ",") -> pd.DataFrame:
    df = _read(path, sep=sep, keep_default_na=False, na_filter=False)
    df = _fix_header(df, path, sep)
    drifted = []
    for col in df.columns:
        if _is_text(df[col]):
            df[col] = df[col].astype("category")
            drifted.append(col)
    log.debug("read %s: %d rows, categorical columns %r", path, len(df), drifted)
    return df


def read_csv_strings(path, na_values: Iterable[Any] = DEFAULT_NA_VALUES,
                     sep: str = ",") -> pd.DataFrame:
    na_values = [str(v) for v in na_values]
    df = _read(path, sep=sep, keep_default_na=False, na_values=na_values)
    df = _fix_header(df, path, sep)
    log.debug("read %s: %d rows, null tokens %r", path, len(df), na_values)
    return df


def load_file(path, categorical: bool = False, **kwargs) -> pd.DataFrame:
    ext = os.path.splitext(str(path))[1].lower()
    if ext == ".csv":
        sep = ","
    elif ext == ".tsv":
        sep = "\t"
    else:
        raise IngestionError(f"unsupported file format {ext!r}, expected .csv or .tsv",
                             path=str(path))
    if categorical:
        return read_csv_categorical(path, sep=sep)
    return read_csv_strings(path, sep=sep, **kwargs)
