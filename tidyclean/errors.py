"""Exception types raised by tidyclean.

Failures fall into three groups, each carrying enough context (column
names, row counts, offending tokens) for a person to fix the call:

  - IngestionError: a file could not be parsed, or a column could not be
    converted to the requested type
  - JoinKeyError: two tables could not be combined because the key
    mapping is missing, ambiguous, or references absent columns
  - ColumnNameError: a rename or filter referenced a column that does not
    exist or cannot be addressed by name
"""
from typing import Any, List, Optional, Sequence


def _fmt_cols(cols: Sequence[Any]) -> str:
    return "[" + ", ".join(repr(c) for c in cols) + "]"


class CleaningError(ValueError):
    """Base class for all tidyclean errors."""
    pass


class IngestionError(CleaningError):
    def __init__(self, message: str, path: Optional[str] = None,
                 column: Optional[str] = None, bad_values: Optional[List[Any]] = None):
        self.path = path
        self.column = column
        self.bad_values = list(bad_values) if bad_values is not None else []
        prefix = ""
        if path is not None:
            prefix += f"{path}: "
        if column is not None:
            prefix += f"column {column!r}: "
        super().__init__(prefix + message)


class JoinKeyError(CleaningError):
    def __init__(self, message: str, left_columns: Sequence[Any] = (),
                 right_columns: Sequence[Any] = ()):
        self.left_columns = list(left_columns)
        self.right_columns = list(right_columns)
        super().__init__(
            f"{message} (left columns: {_fmt_cols(self.left_columns)}, "
            f"right columns: {_fmt_cols(self.right_columns)})")


class ColumnNameError(CleaningError):
    def __init__(self, message: str, column: Optional[str] = None,
                 available: Sequence[Any] = ()):
        self.column = column
        self.available = list(available)
        if self.available:
            message = f"{message}; available columns: {_fmt_cols(self.available)}"
        super().__init__(message)


class DuplicateColumnsError(CleaningError):
    def __init__(self, duplicates: Sequence[Any]):
        self.duplicates = list(duplicates)
        super().__init__(
            "Table has duplicate column names %s. tidyclean requires distinct column names"
            % _fmt_cols(self.duplicates))
