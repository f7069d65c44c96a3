from tidyclean.errors import (
    CleaningError, IngestionError, JoinKeyError, ColumnNameError, DuplicateColumnsError)
from tidyclean.ingest import read_csv_categorical, read_csv_strings, load_file
from tidyclean.convert import (
    category_codes_to_numeric, category_labels_to_numeric, to_numeric,
    coerce_series, find_non_numeric)
from tidyclean.columns import (
    rename_column, rename_columns, clean_column_names, check_columns,
    require_columns, is_addressable)
from tidyclean.filtering import filter_rows, filter_equals
from tidyclean.reshape import wide_to_long, long_to_wide
from tidyclean.recode import derive_column, recode_threshold, recode_bins
from tidyclean.strings import normalize_whitespace, clean_strings, coerce_missing, replace_values
from tidyclean.join import join_tables, join_summary, resolve_key_mapping
from tidyclean.export import write_csv
from tidyclean.commands import run_operations, operations_to_py

__version__ = "0.3.0"
