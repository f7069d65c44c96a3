import logging

import pandas as pd

from tidyclean.columns import check_columns

log = logging.getLogger("tidyclean.export")


def write_csv(df: pd.DataFrame, path, sep: str = ","):
    """Write ``df`` as delimited text: header row, then data rows.

    Column names and order are written as they are, an empty name
    included. Nulls become empty fields and the index is not written.
    """
    check_columns(df)
    df.to_csv(path, sep=sep, index=False, na_rep="")
    log.info("wrote %d rows x %d columns to %s", len(df), len(df.columns), path)
    return path
