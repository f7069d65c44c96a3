import argparse
import logging
import sys

from tidyclean.columns import clean_column_names, rename_column
from tidyclean.errors import CleaningError
from tidyclean.export import write_csv
from tidyclean.filtering import filter_rows
from tidyclean.ingest import DEFAULT_NA_VALUES, read_csv_strings
from tidyclean.join import join_tables
from tidyclean.recode import recode_threshold
from tidyclean.reshape import long_to_wide, wide_to_long

log = logging.getLogger("tidyclean.cli")


def _parse_key(pair):
    left, sep, right = pair.partition("=")
    return left, (right if sep else left)


def _read(args, path):
    na_values = args.na if args.na is not None else DEFAULT_NA_VALUES
    return read_csv_strings(path, na_values=na_values)


def cmd_melt(args):
    df = _read(args, args.input)
    return wide_to_long(df, args.id, value_columns=args.value_col or None,
                        names_to=args.names_to, values_to=args.values_to)


def cmd_pivot(args):
    df = _read(args, args.input)
    return long_to_wide(df, args.id, names_from=args.names_from, values_from=args.values_from)


def cmd_rename(args):
    return rename_column(_read(args, args.input), args.old, args.new)


def cmd_filter(args):
    return filter_rows(_read(args, args.input), args.expr)


def cmd_recode(args):
    return recode_threshold(_read(args, args.input), args.column, args.threshold,
                            labels=tuple(args.labels), new_column=args.new_column)


def cmd_join(args):
    left = _read(args, args.left)
    right = _read(args, args.right)
    on = dict(_parse_key(k) for k in args.key) if args.key else None
    return join_tables(left, right, on=on, how=args.how)


def cmd_clean_names(args):
    return clean_column_names(_read(args, args.input))


def make_parser():
    parser = argparse.ArgumentParser(prog="tidyclean", description="Tabular data cleaning on CSV files")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--na", action="append", metavar="TOKEN",
                        help="Token to read as null; repeatable (default: empty field and NA)")
    common.add_argument("-o", "--output", default=None, help="Output CSV path (default: stdout)")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("melt", parents=[common], help="Reshape wide columns into name/value rows")
    p.add_argument("input")
    p.add_argument("--id", action="append", required=True, help="Identifier column; repeatable")
    p.add_argument("--value-col", action="append", help="Column to gather; repeatable (default: all others)")
    p.add_argument("--names-to", default="name")
    p.add_argument("--values-to", default="value")
    p.set_defaults(func=cmd_melt)

    p = sub.add_parser("pivot", parents=[common], help="Spread name/value rows into columns")
    p.add_argument("input")
    p.add_argument("--id", action="append", required=True, help="Identifier column; repeatable")
    p.add_argument("--names-from", default="name")
    p.add_argument("--values-from", default="value")
    p.set_defaults(func=cmd_pivot)

    p = sub.add_parser("rename", parents=[common], help="Rename one column (OLD may be '')")
    p.add_argument("input")
    p.add_argument("old")
    p.add_argument("new")
    p.set_defaults(func=cmd_rename)

    p = sub.add_parser("filter", parents=[common], help="Keep rows matching a query expression")
    p.add_argument("input")
    p.add_argument("expr")
    p.set_defaults(func=cmd_filter)

    p = sub.add_parser("recode", parents=[common], help="Split a numeric column at a threshold")
    p.add_argument("input")
    p.add_argument("column")
    p.add_argument("threshold", type=float)
    p.add_argument("--labels", nargs=2, default=["low", "high"], metavar=("BELOW", "AT_OR_ABOVE"))
    p.add_argument("--new-column", default=None)
    p.set_defaults(func=cmd_recode)

    p = sub.add_parser("join", parents=[common], help="Join two CSV files")
    p.add_argument("left")
    p.add_argument("right")
    p.add_argument("--key", action="append",
                   help="Key as LEFT=RIGHT, or NAME when shared; repeatable (default: shared columns)")
    p.add_argument("--how", default="inner", choices=["inner", "left", "right", "full"])
    p.set_defaults(func=cmd_join)

    p = sub.add_parser("clean-names", parents=[common], help="Normalize column names to snake_case")
    p.add_argument("input")
    p.set_defaults(func=cmd_clean_names)
    return parser


def main(argv=None):
    parser = make_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, args.log_level),
        format="%(asctime)s pid=%(process)d [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log.debug("running %s with %r", args.command, vars(args))

    try:
        result = args.func(args)
        write_csv(result, args.output if args.output else sys.stdout)
    except (CleaningError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
