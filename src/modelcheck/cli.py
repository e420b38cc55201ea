"""
modelcheck CLI

Check the model classes under one or more directories (or named classes):
base types, relation methods and back-relations.

    modelcheck app/models --database-url sqlite:///dev.db --show-relations
"""

import sys
from typing import List, Optional

import click
from rich import box
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from .base import is_mapped_class, qualified_name
from .config import ValidationConfig, config_from_env, load_config
from .exceptions import ConfigError
from .logging_utils import setup_logging
from .session import create_modelcheck_engine
from .sinks import CollectingSink
from .validate.registry import RelationRegistry, owner_name
from .validator import ModelValidator

EXIT_SUCCESS = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2

CONTEXT_SETTINGS = dict(help_option_names=['-h', '--help'])


# ========================================================================
# Display
# ========================================================================

def display_relations(console: Console, registry: RelationRegistry):
    """Table of every relation edge seen."""
    table = Table(title="Relations", box=box.SIMPLE)
    table.add_column("Model", style="cyan")
    table.add_column("Method")
    table.add_column("Kind", style="magenta")
    table.add_column("Related", style="cyan")

    for edge in registry.edges():
        table.add_row(
            qualified_name(edge.source_class),
            f"{edge.method_name}()",
            str(edge.relation_kind),
            owner_name(edge.target_class),
        )
    console.print(table)


def display_failures(console: Console, failures: List[str]):
    table = Table(title="Failures", box=box.SIMPLE, show_header=False)
    table.add_column("Failure", style="red")
    for failure in failures:
        table.add_row(failure)
    console.print(table)


def display_summary(console: Console, sink: CollectingSink):
    if sink.ok:
        console.print(f"✅ All {len(sink.passes)} model checks passed", style="bold green")
    else:
        console.print(
            f"❌ {len(sink.failures)} failure(s), {len(sink.passes)} check(s) passed",
            style="bold red",
        )


# ========================================================================
# Command
# ========================================================================

def _load_config(config_file: Optional[str]) -> ValidationConfig:
    if config_file:
        return load_config(config_file)
    return config_from_env()


def _create_tables(engine, classes):
    """create_all() the metadata of every mapped class (for empty databases)."""
    seen = []
    for cls in classes:
        if is_mapped_class(cls) and cls.metadata not in seen:
            seen.append(cls.metadata)
            cls.metadata.create_all(engine)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument('paths', nargs=-1, type=click.Path(exists=True, file_okay=False))
@click.option('--model', '-m', 'models', multiple=True,
              help='Dotted name of a model class to check (overrides PATHS)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.option('--database-url', envvar='MODELCHECK_DATABASE_URL',
              help='Database to run relation queries on')
@click.option('--create-tables', is_flag=True, help='Create missing tables before checking')
@click.option('--allow-non-models', is_flag=True, help='Skip (rather than fail) classes that are not models')
@click.option('--no-back-relations', is_flag=True, help='Do not check back-relations')
@click.option('--no-type-check', is_flag=True, help='Do not check back-relation kinds')
@click.option('--mapped-relationships', is_flag=True, help='Also check relationship() attributes')
@click.option('--show-relations', is_flag=True, help='List every relation found')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also log to this file')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(paths, models, config_file, database_url, create_tables, allow_non_models,
        no_back_relations, no_type_check, mapped_relationships, show_relations,
        log_file, verbose):
    """Check ORM model classes and their relations"""
    console = Console()
    stderr_console = Console(file=sys.stderr)

    try:
        setup_logging(log_file=log_file, verbose=verbose)
    except OSError as e:
        setup_logging(verbose=verbose)
        stderr_console.print(f"⚠️  Could not open log file {log_file}: {e}", style="yellow")

    try:
        config = _load_config(config_file)
    except ConfigError as e:
        stderr_console.print(f"❌ Error: {e}", style="bold red")
        sys.exit(EXIT_ERROR)

    if paths:
        config.model_paths = list(paths)
    if allow_non_models:
        config.allow_non_models = True
    if no_back_relations:
        config.back_relation_validation_enabled = False
    if no_type_check:
        config.back_relation_type_validation_enabled = False
    if mapped_relationships:
        config.include_mapped_relationships = True

    try:
        engine, SessionLocal = create_modelcheck_engine(database_url)
    except SQLAlchemyError as e:
        stderr_console.print(f"❌ Database error: {e}", style="bold red")
        sys.exit(EXIT_ERROR)

    session = SessionLocal()
    sink = CollectingSink()
    validator = ModelValidator(config=config, sink=sink, session=session)

    try:
        classes = validator.resolve_classes(models)
        if create_tables:
            _create_tables(engine, classes)
        registry = validator.assert_classes(classes)
    except (ConfigError, FileNotFoundError, ImportError) as e:
        stderr_console.print(f"❌ Error: {e}", style="bold red")
        sys.exit(EXIT_ERROR)
    finally:
        session.close()
        engine.dispose()

    if show_relations:
        display_relations(console, registry)
    if not sink.ok:
        display_failures(console, sink.failures)
    display_summary(console, sink)

    sys.exit(EXIT_SUCCESS if sink.ok else EXIT_FAILURES)


def main():
    cli()


if __name__ == '__main__':
    main()
