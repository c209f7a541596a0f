import argparse
import logging
import sys
from typing import Dict, List, Optional

from psql_schema_compiler.colored_logging import (
    setup_colored_logging,
    log_success,
    log_progress,
    log_section
)
from psql_schema_compiler.compiler import compile_all_enums, compile_all_models
from psql_schema_compiler.config import load_config
from psql_schema_compiler.domain.models import Table
from psql_schema_compiler.exceptions import SchemaCompilerError
from psql_schema_compiler.registry import load_registry
from psql_schema_compiler.writer import TableWriter, YamlTableWriter


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile declarative domain models into PostgreSQL table definitions."
    )
    parser.add_argument(
        "-r",
        "--registry",
        required=True,
        help="Directory containing 'models/' and 'enums/' YAML definitions.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Path to the YAML configuration file.",
    )
    parser.add_argument(
        "-s",
        "--schema",
        dest="schema_name",
        help="PostgreSQL schema for the generated tables. Overrides config file setting.",
    )
    parser.add_argument(
        "--big-serial",
        dest="use_big_serial",
        action="store_true",
        default=None,
        help="Use BIGSERIAL/BIGINT for auto-increment keys.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="File to write the YAML table definitions to (default: stdout).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose DEBUG logging.",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output (useful for CI/CD environments).",
    )
    return parser


def write_compiled_tables(
    writer: TableWriter,
    enum_tables: Dict[str, Table],
    model_tables: Dict[str, List[Table]],
) -> None:
    """Hand enum tables, then model tables, to a writer in sorted name order."""
    for enum_name in sorted(enum_tables):
        writer.write_table(enum_tables[enum_name])
    for model_name in sorted(model_tables):
        for table in model_tables[model_name]:
            writer.write_table(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_colored_logging(level=log_level, use_colors=not args.no_color)

    try:
        log_progress(logger, "Loading configuration...")
        config = load_config(args.config, args)

        log_progress(logger, f"Loading registry from {args.registry}...")
        registry = load_registry(args.registry)

        log_section(logger, "Schema Compilation")
        writer = YamlTableWriter()

        enum_tables = compile_all_enums(config, registry)
        model_tables = compile_all_models(config, registry)
        write_compiled_tables(writer, enum_tables, model_tables)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                writer.dump(f)
            log_success(logger, f"Wrote {len(writer.tables)} tables to {args.output}")
        else:
            writer.dump(sys.stdout)
            log_success(logger, f"Compiled {len(writer.tables)} tables")

    except SchemaCompilerError as e:
        logger.error(f"Compilation failed: {e}", exc_info=args.verbose)
        return 1
    except OSError as e:
        logger.error(f"I/O Error: {e}", exc_info=args.verbose)
        return 1

    return 0


# --- Script Entry Point ---
if __name__ == "__main__":
    sys.exit(main())
