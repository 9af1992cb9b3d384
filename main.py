import argparse
import curses
import logging
import os
import sys

import config_paths
from errors import ViewerError
from log_setup import configure_logging
from table_store import H5TableStore

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="h5pivot",
        description="h5pivot - terminal pivot viewer for labelled HDF5 tables",
    )
    parser.add_argument("file", help="HDF5 file to browse")
    parser.add_argument(
        "-d",
        "--dataset",
        metavar="NAME",
        help="open group/table NAME straight away instead of starting in the catalog",
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    return parser


def main(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)

    cfg = config_paths.load_config()
    try:
        config_paths.ensure_config_dirs()
        configure_logging(cfg["LOG_LEVEL"])
    except OSError as exc:
        print(f"Logging disabled: {exc}", file=sys.stderr)

    path = os.path.abspath(os.path.expanduser(args.file))
    if not os.path.isfile(path):
        print(f"File not found: {args.file}", file=sys.stderr)
        sys.exit(1)

    store = H5TableStore(path)
    try:
        store.open()
    except ViewerError as exc:
        print(f"Unable to open {args.file}: {exc}", file=sys.stderr)
        sys.exit(1)

    initial_table = None
    if args.dataset:
        try:
            initial_table = store.open_table(args.dataset)
        except (ViewerError, KeyError) as exc:
            print(f"Unable to open dataset {args.dataset}: {exc}", file=sys.stderr)
            store.close()
            sys.exit(1)

    logger.info("Browsing %s", path)

    def curses_main(stdscr):
        Orchestrator(stdscr, store, cfg, file_path=path, initial_table=initial_table).run()

    try:
        curses.wrapper(curses_main)
    finally:
        store.close()


if __name__ == "__main__":
    main()
