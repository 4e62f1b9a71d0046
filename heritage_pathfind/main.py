#!/usr/bin/env python3
"""
main.py  -  heritage-pathfind command line entry point
  - reads the semicolon-delimited relationship table
  - builds the family graph (NetworkX)
  - prints the shortest labeled chain of relatives between two persons
"""

import sys
import logging
import argparse

from .constants import (
    CSV_DELIMITER, INPUT_ENCODING, LOG_FILE, LOG_FORMAT, LOG_LEVEL, USAGE_EXAMPLE,
)
from .heritage_graph import build_graph
from .path_resolver import UnknownPersonError, describe_relationship
from .records import RowParseError


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        print(USAGE_EXAMPLE, file=sys.stderr)
        self.exit(2, f"{self.prog}: error: {message}\n")


def delimiter_type(value):
    if len(value) != 1:
        raise argparse.ArgumentTypeError(f"delimiter must be a single character, got {value!r}")
    return value


def build_arg_parser():
    parser = _ArgumentParser(
        prog="heritage-pathfind",
        description="Print the shortest chain of relatives between two persons of a family table.",
        epilog=USAGE_EXAMPLE,
    )
    parser.add_argument("csv_path", help="Path to the ';'-delimited relationship table.")
    parser.add_argument("start_id", type=int, help="PersonID the query is about (printed last).")
    parser.add_argument("finish_id", type=int, help="PersonID of the relative to reach (printed first).")
    parser.add_argument("--delimiter", type=delimiter_type, default=CSV_DELIMITER,
                        help="Field separator (default: %(default)r).")
    parser.add_argument("--reciprocal", action="store_true",
                        help="Report 'Child' when a parent edge is walked from the child's side.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v) or per-row detail (-vv) to stderr.")
    return parser


def configure_logging(verbosity=0):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, LOG_LEVEL.upper(), logging.WARNING)
    # Errors always reach stderr.
    level = min(level, logging.ERROR)

    handlers = [logging.StreamHandler()]
    if LOG_FILE:
        handlers.append(logging.FileHandler(LOG_FILE))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
    logging.getLogger().setLevel(level)


# ------------------------------------------------------------------ main
def main(argv=None):
    """
    Reads the table, builds the graph and prints one relationship query.

    Returns:
        int: Process exit code; 0 when a chain or the no-relationship message
             was printed, 1 when the file, its contents or an id is invalid.
    """
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose)

    logging.info(f"Step 1: Reading {args.csv_path} …")
    try:
        with open(args.csv_path, newline="", encoding=INPUT_ENCODING) as csv_file:
            graph, index = build_graph(csv_file, delimiter=args.delimiter)
    except OSError as e:
        logging.error(f"Cannot read {args.csv_path}: {e}")
        return 1
    except RowParseError as e:
        logging.error(f"Invalid relationship table {args.csv_path}, {e}")
        return 1

    logging.info(f"Step 2: Searching path from {args.start_id} to {args.finish_id} …")
    try:
        output = describe_relationship(graph, index, args.start_id, args.finish_id,
                                       reciprocal=args.reciprocal)
    except UnknownPersonError as e:
        logging.error(str(e))
        return 1

    print(output)
    return 0


# ------------------------------------------------------------------ entrypoint
if __name__ == "__main__":
    sys.exit(main())
