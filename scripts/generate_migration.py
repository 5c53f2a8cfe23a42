#!/usr/bin/env python
# ============================================================================
# MIGRATION GENERATION SCRIPT
# ============================================================================
# PURPOSE: Generate CREATE TABLE scripts from entities, or introspect a database
# USAGE:
#   python scripts/generate_migration.py src/entities               # SQL to stdout
#   python scripts/generate_migration.py src/entities --drop        # DROP script
#   python scripts/generate_migration.py --introspect               # Live schema
# ============================================================================

import sys
import os
import json
import argparse

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ormforge.config import get_defaults, load_defaults
from ormforge.exceptions import SchemaError
from ormforge.infrastructure import DatabaseConnection
from ormforge.logging import configure_logging
from ormforge.migration import MigrationGenerator
from ormforge.schema import EntitySchemaReader


def _status(message: str = "") -> None:
    # stdout carries SQL only
    print(message, file=sys.stderr)


def run_introspection(args) -> int:
    kwargs = {"schema_name": args.schema_name} if args.schema_name else {}

    try:
        db = DatabaseConnection(url=args.connection, dialect=args.dialect)
        _status(f"Dialect: {db.dialect.value}")
        _status("=" * 70)
        schema = db.introspect(migrations_table=args.migrations_table, **kwargs)
    except (SchemaError, ValueError, ImportError) as e:
        _status(f"❌ Introspection failed: {e}")
        return 1
    except Exception as e:
        # Driver errors (psycopg, PyMySQL, sqlite3) share no base class
        _status(f"❌ Connection failed: {type(e).__name__}: {e}")
        return 1

    _status(f"\nTables ({len(schema)}):")
    for table in schema.all_tables():
        _status(f"  - {table.name} ({len(table.columns)} columns, {len(table.foreign_keys)} foreign keys)")

    if args.json:
        print(json.dumps(schema.model_dump(mode="json"), indent=2))
    return 0


def run_generation(args) -> int:
    directory = args.directory or get_defaults().discovery.entities_path
    reader = EntitySchemaReader(strict=args.strict or None)
    try:
        generator = MigrationGenerator(
            dialect=args.dialect,
            reader=reader,
            if_not_exists=args.if_not_exists or None,
        )
    except ValueError as e:
        _status(f"❌ Generation failed: {e}")
        return 1

    _status(f"Entities: {directory}")
    _status(f"Dialect: {generator.dialect.value}")
    _status(f"Mode: {'DROP' if args.drop else 'CREATE'}")
    _status("=" * 70)

    try:
        if args.drop:
            sql = generator.generate_drop(directory)
            report = None
        else:
            report = generator.generate_report(directory)
            sql = report.to_sql()
    except (SchemaError, ValueError) as e:
        # ValueError covers pydantic.ValidationError from a column marker
        _status(f"❌ Generation failed: {e}")
        return 1

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(sql + "\n")
        _status(f"SQL written to {args.output}")
    elif sql:
        print(sql)

    if report is None:
        return 0

    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2)

    _status("\n[RESULTS]\n")
    for result in report.tables:
        status_emoji = {
            "success": "✅",
            "failed": "❌",
            "skipped": "⏭️"
        }.get(result.status, "❓")
        _status(f"{status_emoji} {result.table}")
        if result.error:
            _status(f"   Error: {result.error}")

    for path, reason in report.discovery_skipped.items():
        _status(f"⏭️ {path}: {reason}")

    _status("\n" + "=" * 70)
    if report.success:
        _status(f"✅ Generated {len(report.statements)} statements")
        return 0

    _status(f"❌ {len(report.errors)} tables failed to compile")
    return 1


def main():
    parser = argparse.ArgumentParser(
        description="Generate DDL from entity classes or introspect a live database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/generate_migration.py src/entities --dialect postgresql
  python scripts/generate_migration.py src/entities --report report.json
  python scripts/generate_migration.py --introspect --connection sqlite:///app.db

Environment Variables:
  ORMFORGE_DIALECT            Target dialect (default: mysql)
  ORMFORGE_ENTITIES_PATH      Entity directory (default: src/entities)
  ORMFORGE_STRICT_DISCOVERY   Fail on entity files that cannot be loaded
  ORMFORGE_DATABASE_URL       Connection URL for --introspect
  ORMFORGE_DB_HOST / ORMFORGE_DB_PORT / ORMFORGE_DB_NAME
  ORMFORGE_DB_USER / ORMFORGE_DB_PASSWORD
  LOG_FORMAT                  "json" for structured logs
        """
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Entity directory (default: discovery.entities_path)"
    )
    parser.add_argument(
        "--dialect",
        type=str,
        help="mysql, postgresql or sqlite (default: database.dialect)"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML configuration file"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on entities that cannot be loaded or reflected"
    )
    parser.add_argument(
        "--if-not-exists",
        action="store_true",
        help="Emit CREATE TABLE IF NOT EXISTS"
    )
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Emit DROP TABLE statements instead"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write SQL to a file instead of stdout"
    )
    parser.add_argument(
        "--report",
        type=str,
        help="Write a JSON generation report"
    )
    parser.add_argument(
        "--introspect",
        action="store_true",
        help="Read the schema of a live database"
    )
    parser.add_argument(
        "--connection",
        type=str,
        help="Database URL (overrides environment)"
    )
    parser.add_argument(
        "--schema-name",
        type=str,
        help="PostgreSQL schema to introspect (default: database.schema_name)"
    )
    parser.add_argument(
        "--migrations-table",
        type=str,
        help="Bookkeeping table skipped by introspection"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the introspected schema as JSON"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Structured JSON logging"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    args = parser.parse_args()

    configure_logging(
        level="DEBUG" if args.verbose else "WARNING",
        json_output=args.json_logs,
    )

    if args.config:
        load_defaults(args.config)

    _status("=" * 70)
    _status("ORMFORGE - " + ("Schema Introspection" if args.introspect else "Migration Generation"))
    _status("=" * 70)

    if args.introspect:
        sys.exit(run_introspection(args))
    sys.exit(run_generation(args))


if __name__ == "__main__":
    main()
