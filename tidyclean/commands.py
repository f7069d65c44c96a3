"""Recorded single-table cleaning operations.

An operation list looks like::

    [{'command': 'rename', 'args': ['', 'row_id']},
     {'command': 'wide_to_long', 'args': [['Round'], 'Player', 'Time']}]

``run_operations`` applies it to a DataFrame; ``operations_to_py`` emits a
stand-alone ``clean(df)`` function doing the same thing with pandas, so a
cleaning session can be saved as a script.
"""
import logging
from typing import Any, Dict, List

import pandas as pd

from tidyclean.columns import rename_column, require_columns
from tidyclean.convert import to_numeric
from tidyclean.filtering import as_value_list, filter_equals
from tidyclean.recode import recode_threshold
from tidyclean.reshape import wide_to_long
from tidyclean.strings import clean_strings

log = logging.getLogger("tidyclean.commands")

CODE_PREAMBLE = (
    "import numpy as np\n"
    "import pandas as pd\n"
    "from tidyclean.strings import normalize_whitespace\n"
)


class Command(object):
    command_name = ""

    @staticmethod
    def transform(df, *args):
        return df

    @staticmethod
    def transform_to_py(*args):
        return "    #noop"


class Rename(Command):
    command_name = "rename"

    @staticmethod
    def transform(df, old, new):
        return rename_column(df, old, new)

    @staticmethod
    def transform_to_py(old, new):
        return "    df = df.rename(columns={%r: %r})" % (old, new)


class DropColumns(Command):
    command_name = "drop_columns"

    @staticmethod
    def transform(df, columns):
        require_columns(df, columns)
        return df.drop(columns=list(columns))

    @staticmethod
    def transform_to_py(columns):
        return "    df = df.drop(columns=%r)" % (list(columns),)


class FilterEquals(Command):
    command_name = "filter_equals"

    @staticmethod
    def transform(df, column, values):
        return filter_equals(df, column, as_value_list(values))

    @staticmethod
    def transform_to_py(column, values):
        return "    df = df[df[%r].isin(%r)].reset_index(drop=True)" % (column, as_value_list(values))


class WideToLong(Command):
    command_name = "wide_to_long"

    @staticmethod
    def transform(df, id_columns, names_to, values_to):
        return wide_to_long(df, id_columns, names_to=names_to, values_to=values_to)

    @staticmethod
    def transform_to_py(id_columns, names_to, values_to):
        return "\n".join([
            "    df = df.reset_index(drop=True).melt(id_vars=%r, var_name=%r, value_name=%r, ignore_index=False)"
            % (list(id_columns), names_to, values_to),
            "    df = df.sort_index(kind='stable').reset_index(drop=True)",
        ])


class ToNumeric(Command):
    command_name = "to_numeric"

    @staticmethod
    def transform(df, column):
        require_columns(df, [column])
        df = df.copy()
        df[column] = to_numeric(df[column], strict=False)
        return df

    @staticmethod
    def transform_to_py(column):
        return "\n".join([
            "    _stripped = df[%r].astype(object).map(lambda v: v.strip() if isinstance(v, str) else v)"
            % (column,),
            "    df[%r] = pd.to_numeric(_stripped, errors='coerce')" % (column,),
        ])


class RecodeThreshold(Command):
    command_name = "recode_threshold"

    @staticmethod
    def transform(df, column, threshold, below, above, new_column):
        return recode_threshold(df, column, threshold, labels=(below, above), new_column=new_column)

    @staticmethod
    def transform_to_py(column, threshold, below, above, new_column):
        return "\n".join([
            "    _col = df[%r]" % (column,),
            "    _high = (_col >= %r).fillna(False).astype(bool)" % (threshold,),
            "    df[%r] = pd.Categorical(np.where(_col.isna(), None, np.where(_high, %r, %r)), categories=[%r, %r])"
            % (new_column or column, above, below, below, above),
        ])


class StripStrings(Command):
    command_name = "strip_strings"

    @staticmethod
    def transform(df, column):
        return clean_strings(df, [column])

    @staticmethod
    def transform_to_py(column):
        return "    df[%r] = df[%r].map(normalize_whitespace)" % (column, column)


DEFAULT_COMMANDS = [Rename, DropColumns, FilterEquals, WideToLong, ToNumeric,
                    RecodeThreshold, StripStrings]


def _command_map(commands) -> Dict[str, Any]:
    return {kls.command_name: kls for kls in commands}


def _lookup(cmd_map, operation):
    name = operation["command"]
    if name not in cmd_map:
        raise ValueError(f"Unknown command {name!r}, expected one of {sorted(cmd_map)!r}")
    return cmd_map[name], operation.get("args", [])


def run_operations(df: pd.DataFrame, operations: List[Dict[str, Any]],
                   commands=DEFAULT_COMMANDS) -> pd.DataFrame:
    cmd_map = _command_map(commands)
    for i, operation in enumerate(operations):
        kls, args = _lookup(cmd_map, operation)
        df = kls.transform(df, *args)
        log.info("step %d %s%r -> %d rows x %d columns",
                 i, kls.command_name, tuple(args), len(df), len(df.columns))
    return df


def operations_to_py(operations: List[Dict[str, Any]], commands=DEFAULT_COMMANDS) -> str:
    cmd_map = _command_map(commands)
    lines = []
    for operation in operations:
        kls, args = _lookup(cmd_map, operation)
        lines.append(kls.transform_to_py(*args))
    body = "\n".join(lines) if lines else "    pass"
    return CODE_PREAMBLE + "\n\ndef clean(df):\n" + body + "\n    return df\n"
