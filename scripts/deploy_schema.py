#!/usr/bin/env python
# ============================================================================
# SCHEMA DEPLOYMENT SCRIPT
# ============================================================================
# PURPOSE: Compile table definitions and deploy them to a SQLite database
# USAGE:
#   python scripts/deploy_schema.py --dry-run                 # Preview SQL
#   python scripts/deploy_schema.py --database app.db         # Execute deployment
#   python scripts/deploy_schema.py --table users --dry-run   # Single table
# ============================================================================

import sys
import os
import argparse
import sqlite3
from dataclasses import replace

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rulesql.config import get_defaults
from rulesql.contracts import TableConfigError
from rulesql.logging import ComponentType, configure_logging, get_logger, log_context
from services import TableService

logger = get_logger("rulesql.deploy", ComponentType.SCRIPT)


def main():
    parser = argparse.ArgumentParser(
        description="Compile table definitions into SQLite DDL",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/deploy_schema.py --dry-run                   # Print DDL for every table
  python scripts/deploy_schema.py --database app.db           # Create tables in app.db
  python scripts/deploy_schema.py --table users --table posts # Selected tables only

Environment Variables:
  RULESQL_TABLES_DIR        Directory of table YAML files (default: tables)
  RULESQL_IF_NOT_EXISTS     Emit IF NOT EXISTS (default: false)
  LOG_LEVEL                 Log level (default: INFO)
  LOG_FORMAT                "json" for structured logs
        """
    )
    parser.add_argument(
        "--tables-dir",
        type=str,
        help="Directory containing table YAML files"
    )
    parser.add_argument(
        "--table",
        action="append",
        dest="tables",
        metavar="NAME",
        help="Table to compile (repeatable; default: all)"
    )
    parser.add_argument(
        "--database",
        type=str,
        help="SQLite database file to apply the DDL to"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print DDL without executing"
    )
    parser.add_argument(
        "--if-not-exists",
        action="store_true",
        help="Emit CREATE ... IF NOT EXISTS"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    defaults = get_defaults()
    configure_logging(
        level="DEBUG" if args.verbose else defaults.logging.level,
        json_output=defaults.logging.json_output,
    )

    compiler_defaults = defaults.compiler
    if args.if_not_exists:
        compiler_defaults = replace(compiler_defaults, if_not_exists=True)

    service = TableService(tables_dir=args.tables_dir, compiler_defaults=compiler_defaults)
    service.load_all()

    names = args.tables or sorted(spec.name for spec in service.list_all())
    if not names:
        print(f"No table definitions found in {service.tables_dir}")
        sys.exit(1)

    try:
        compiled = [service.compile(name) for name in names]
    except KeyError as e:
        print(f"Error: {e.args[0]}")
        sys.exit(1)
    except TableConfigError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"   - {error}")
        sys.exit(1)

    if args.dry_run or not args.database:
        for table in compiled:
            print(f"-- {table.name}")
            for stmt in table.statements():
                print(stmt)
            print()
        return

    print(f"Database: {args.database}")
    conn = sqlite3.connect(args.database)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        total = 0
        for table in compiled:
            with log_context(table=table.name, operation="deploy"):
                total += table.execute(conn)
    except sqlite3.Error as e:
        logger.error(f"Deployment failed: {e}")
        print(f"Deployment failed: {e}")
        sys.exit(1)
    finally:
        conn.close()

    print(f"Executed {total} statements for {len(compiled)} tables")


if __name__ == "__main__":
    main()
