# ============================================================================
# SUPATOOL - COMMAND LINE ENTRY POINT
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - CLI application entry point
# PURPOSE: Parse commands and dispatch to services and generators
# CREATED: 17 OCT 2026
# ============================================================================
"""
Supatool Command Line

Commands:
    sync          Sync local schema files with the database
    extract       Extract database objects into SQL files
    config:init   Write a supatool.config.json template
    gen:*         Generate SQL, RLS, types, CRUD and docs from a model YAML
    help          Show help

Usage:
    supatool sync --dir ./supabase/schemas --tables "user_*"
    supatool extract --all -o ./supabase/schemas
    supatool gen:all docs/model.yaml
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import psycopg

from __version__ import __version__
from core.config import (
    get_defaults,
    load_env_files,
    resolve_config,
    create_config_template,
)
from core.errors import DatabaseConnectionError, DatabaseQueryError, SupatoolError
from core.logging import configure_logging, get_logger, ComponentType
from generators import (
    generate_all,
    generate_crud,
    generate_relations_doc,
    generate_rls,
    generate_schema_sql,
    generate_table_doc,
    generate_types,
    write_generated,
)
from services.confirmation import Confirmer, TerminalConfirmer
from services.extract_service import ExtractOptions, extract_definitions
from services.model_parser import parse_model_yaml
from services.sync_service import SyncOptions, sync_all_tables

logger = get_logger(__name__, ComponentType.CLI)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

MISSING_CONNECTION_MESSAGE = (
    "Connection string is required. Use --connection, set "
    "SUPABASE_CONNECTION_STRING or DATABASE_URL, or run 'supatool config:init'."
)

HELP_TEXT = f"""
Supatool CLI v{__version__} - Supabase schema sync, extraction and code generation

Usage:
  supatool <command> [options]

Commands:
  sync           Sync local schema files with the remote database
  extract        Extract tables, views and other objects into SQL files
  config:init    Write a supatool.config.json template
  gen:types      Generate TypeScript types from model YAML
  gen:crud       Generate CRUD TypeScript code from model YAML
  gen:docs       Generate Markdown documentation from model YAML
  gen:sql        Generate SQL (tables, relations, RLS/security) from model YAML
  gen:rls        Generate RLS/security SQL from model YAML
  gen:all        Generate types, CRUD and docs from model YAML
  help           Show help

Run 'supatool <command> --help' for command options.

Environment:
  SUPABASE_CONNECTION_STRING   Connection string (preferred)
  DATABASE_URL                 Connection string (fallback)
  SUPATOOL_MAX_CONCURRENT      Introspection batch size (5-50, default 20)
  LOG_LEVEL, LOG_FORMAT=json   Logging on stderr

Examples:
  supatool sync -t "user_*"
  supatool extract --all --schema public,auth -o supabase/schemas
  supatool gen:sql model.yaml -o docs/generated/schema.sql
"""


# ============================================================================
# PARSER
# ============================================================================

def _add_connection_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--connection", "-c",
        help="Database connection string (overrides environment and config file)",
    )
    parser.add_argument(
        "--config",
        help="Path to supatool.config.json (default: ./supatool.config.json)",
    )


def _add_model_command(subparsers, name: str, help_text: str, default_out: Optional[str]) -> None:
    command = subparsers.add_parser(name, help=help_text, description=help_text)
    command.add_argument("model_path", help="Model YAML file")
    if default_out is not None:
        command.add_argument("--out", "-o", default=default_out, help=f"Output path (default: {default_out})")


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for every supatool command."""
    defaults = get_defaults()
    generated = defaults.generators

    parser = argparse.ArgumentParser(
        prog="supatool",
        description="Supabase schema sync, extraction and code generation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  SUPABASE_CONNECTION_STRING, DATABASE_URL, SUPATOOL_MAX_CONCURRENT,
  LOG_LEVEL, LOG_FORMAT
        """,
    )
    parser.add_argument("--version", "-V", action="version", version=f"supatool {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress to stderr")

    subparsers = parser.add_subparsers(dest="command")

    # sync
    sync = subparsers.add_parser("sync", help="Sync local schema files with the database")
    _add_connection_options(sync)
    sync.add_argument("--dir", "-d", help=f"Schema directory (default: {defaults.sync.schema_dir})")
    sync.add_argument("--tables", "-t", help="Table name pattern, e.g. 'user_*' (default: *)")
    sync.add_argument("--force", "-f", action="store_true", help="Overwrite without confirmation")

    # extract
    extract = subparsers.add_parser("extract", help="Extract database objects into SQL files")
    _add_connection_options(extract)
    extract.add_argument("--output-dir", "-o", help=f"Output directory (default: {defaults.sync.schema_dir})")
    extract.add_argument("--tables", "-t", default="*", help="Object name pattern (default: *)")
    mode = extract.add_mutually_exclusive_group()
    mode.add_argument("--tables-only", action="store_true", help="Extract tables only")
    mode.add_argument("--views-only", action="store_true", help="Extract views only")
    mode.add_argument(
        "--all", action="store_true",
        help="Extract tables, views, RLS, functions, triggers, cron jobs and types",
    )
    extract.add_argument(
        "--no-separate", dest="separate", action="store_false",
        help="Write every file into the output directory itself",
    )
    extract.add_argument(
        "--schema", default=",".join(defaults.introspection.default_schemas),
        help="Comma separated schema names (default: public)",
    )
    extract.add_argument("--force", "-f", action="store_true", help="Overwrite without confirmation")

    # config:init
    config_init = subparsers.add_parser("config:init", help="Write a supatool.config.json template")
    config_init.add_argument(
        "--out", "-o", default=defaults.sync.config_file_name,
        help=f"Output path (default: {defaults.sync.config_file_name})",
    )

    # model generators
    _add_model_command(subparsers, "gen:types", "Generate TypeScript types from model YAML", generated.types_file)
    _add_model_command(subparsers, "gen:crud", "Generate CRUD TypeScript code from model YAML", generated.crud_dir)
    _add_model_command(subparsers, "gen:docs", "Generate Markdown docs from model YAML", generated.table_doc_file)
    _add_model_command(subparsers, "gen:sql", "Generate tables, relations and RLS SQL from model YAML", generated.sql_file)
    _add_model_command(subparsers, "gen:rls", "Generate RLS/security SQL from model YAML", generated.rls_file)
    _add_model_command(subparsers, "gen:all", "Generate types, CRUD and docs from model YAML", generated.output_root)

    subparsers.add_parser("help", help="Show help")
    return parser


# ============================================================================
# COMMANDS
# ============================================================================

def run_sync(args: argparse.Namespace, confirmer: Confirmer) -> int:
    config = resolve_config(args.connection, args.dir, args.tables, args.config)
    if not config.has_connection:
        print(f"Error: {MISSING_CONNECTION_MESSAGE}", file=sys.stderr)
        return EXIT_FAILURE

    options = SyncOptions(
        connection_string=config.connection_string,
        schema_dir=Path(config.schema_dir),
        table_pattern=config.table_pattern,
        force=args.force,
    )
    session = asyncio.run(sync_all_tables(options, confirmer))
    logger.info(
        f"written={len(session.written)} skipped={len(session.skipped)} "
        f"migrations={len(session.migrations)} backed_up={len(session.backed_up)}"
    )
    return EXIT_OK


def run_extract(args: argparse.Namespace, confirmer: Confirmer) -> int:
    config = resolve_config(args.connection, args.output_dir, None, args.config)
    if not config.has_connection:
        print(f"Error: {MISSING_CONNECTION_MESSAGE}", file=sys.stderr)
        return EXIT_FAILURE

    schemas = [name.strip() for name in args.schema.split(",") if name.strip()]
    options = ExtractOptions(
        connection_string=config.connection_string,
        output_dir=Path(config.schema_dir),
        separate_directories=args.separate,
        tables_only=args.tables_only,
        views_only=args.views_only,
        all=args.all,
        table_pattern=args.tables,
        force=args.force,
        schemas=schemas or list(get_defaults().introspection.default_schemas),
    )
    try:
        asyncio.run(extract_definitions(options, confirmer))
    except (SupatoolError, psycopg.Error):
        raise
    except Exception as e:
        logger.exception("Extraction failed")
        print(f"✖ Extraction failed: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def run_config_init(args: argparse.Namespace) -> int:
    path = create_config_template(args.out)
    print(f"Config template written: {path}")
    print("Set SUPABASE_CONNECTION_STRING in .env.local rather than committing credentials.")
    return EXIT_OK


def run_generator(args: argparse.Namespace) -> int:
    model = parse_model_yaml(args.model_path)
    command = args.command

    if command == "gen:types":
        paths = write_generated(generate_types(model, args.out))
        print(f"TypeScript types written: {paths[0]}")
    elif command == "gen:crud":
        paths = write_generated(generate_crud(model, args.out))
        print(f"CRUD modules written: {args.out} ({len(paths)} files)")
    elif command == "gen:docs":
        relations_path = Path(args.out).parent / "relations.md"
        write_generated([generate_table_doc(model, args.out), generate_relations_doc(model, relations_path)])
        print(f"Table definitions written: {args.out}")
        print(f"Relations written: {relations_path}")
    elif command == "gen:sql":
        paths = write_generated(generate_schema_sql(model, args.out))
        print(f"Tables, relations and RLS/security SQL written: {paths[0]}")
    elif command == "gen:rls":
        paths = write_generated(generate_rls(model, args.out))
        print(f"RLS/security SQL written: {paths[0]}")
    elif command == "gen:all":
        paths = write_generated(generate_all(model, args.out))
        for path in paths:
            print(f"Written: {path}")
    return EXIT_OK


def dispatch(args: argparse.Namespace, confirmer: Confirmer) -> int:
    if args.command == "sync":
        return run_sync(args, confirmer)
    if args.command == "extract":
        return run_extract(args, confirmer)
    if args.command == "config:init":
        return run_config_init(args)
    if args.command.startswith("gen:"):
        return run_generator(args)
    print(HELP_TEXT)
    return EXIT_OK


# ============================================================================
# ENTRY POINT
# ============================================================================

def main(argv: Optional[List[str]] = None, confirmer: Optional[Confirmer] = None) -> int:
    """
    Run supatool.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])
        confirmer: Prompt implementation (defaults to the terminal)

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(HELP_TEXT)
        return EXIT_OK

    args = build_parser().parse_args(argv)
    load_env_files()
    configure_logging(level="INFO" if args.verbose else "WARNING")

    if args.command is None:
        print(HELP_TEXT)
        return EXIT_OK

    try:
        return dispatch(args, confirmer or TerminalConfirmer())
    except DatabaseConnectionError as e:
        print(e.render(), file=sys.stderr)
        return EXIT_FAILURE
    except psycopg.Error as e:
        logger.debug("Database query failed", exc_info=True)
        print(DatabaseQueryError.from_exception(e).render(), file=sys.stderr)
        return EXIT_FAILURE
    except SupatoolError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation cancelled", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
