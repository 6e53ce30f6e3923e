from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from rowsync.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from rowsync.excel.grid import GridUnavailableError, UnresolvedSheetError
from rowsync.logging.init import log_summary, setup_logging
from rowsync.services.session import ColumnMappingError, WorkbookSession
from rowsync.table.record_table import TableKeyError

"""CLI entrypoint.

    python -m rowsync.cli get DATA Quantity 2
    python -m rowsync.cli set DATA Quantity 2 "1 234,50"
    python -m rowsync.cli inspect

Config path resolution: --config, then ROWSYNC_CONFIG (``.env`` is loaded
first), then config/rowsync.yml.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

INSPECT_ROWS = 3


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="rowsync", description="Spreadsheet rows as records")
    p.add_argument("--config", type=Path, default=None, help="Path to session config (YAML)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    g = sub.add_parser("get", help="Print the value of one cell")
    g.add_argument("sheet")
    g.add_argument("column", help="Logical column name or column letter")
    g.add_argument("row", type=int)

    s = sub.add_parser("set", help="Write one cell (grid and record table) and save")
    s.add_argument("sheet")
    s.add_argument("column", help="Logical column name or column letter")
    s.add_argument("row", type=int)
    s.add_argument("value")
    s.add_argument("--no-table", action="store_true", help="Write the grid only")

    sub.add_parser("inspect", help="Print column maps and first rows of configured sheets")
    return p.parse_args(argv)


def _config_path(args: argparse.Namespace) -> Path:
    if args.config is not None:
        return args.config
    env = os.getenv("ROWSYNC_CONFIG")
    return Path(env) if env else DEFAULT_CONFIG_PATH


def _inspect(session: WorkbookSession, titles: list[str]) -> int:
    for title in titles:
        session.sheet(title)
        print(f"SHEET: {title} cols={session.columns}")
        table = session.table()
        for record in list(table.records())[:INSPECT_ROWS]:
            print(f"  row={session.first_data_row + record.position} id={record.id} values={record.values}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    # None のときのみシステム引数を読む (テストで [] を渡すケース)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=Path(".env"), override=False)

    try:
        cfg = load_config(_config_path(args))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    session = WorkbookSession.from_config(cfg)
    try:
        session.open()
        if args.command == "inspect":
            titles = list(cfg.sheets) or session.sheet_titles
            return _inspect(session, titles)

        session.sheet(args.sheet)
        if args.command == "get":
            print(session.read(args.column, args.row))
            return EXIT_SUCCESS

        if not args.no_table:
            session.table()
        session.write(args.column, args.row, args.value)
        stored = session.read(args.column, args.row)
        session.save()
        log_summary(
            f"sheet={args.sheet} column={args.column} row={args.row} "
            f"value={stored!r} table={'no' if args.no_table else 'yes'}"
        )
        return EXIT_SUCCESS
    except UnresolvedSheetError as e:
        logger.error(f"sheet: {e}")
        return EXIT_FATAL
    except (GridUnavailableError, ColumnMappingError, TableKeyError) as e:
        logger.error(f"grid: {e}")
        return EXIT_FATAL
    finally:
        session.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
