from __future__ import annotations

import importlib
import sys

import typer

from sqlnorm.config import get_settings
from sqlnorm.connections.builder import ConnectionBuilder
from sqlnorm.metadata.registry import default_registry
from sqlnorm.schema.reconciler import reconcile
from sqlnorm.sql import builder
from sqlnorm.sql.dialects import Dialect
from sqlnorm.utils.logging import configure_logging

app = typer.Typer(help="sqlnorm CLI.")


def _load_type(target: str) -> type:
    """Resolve ``package.module:ClassName`` to the record class."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise typer.BadParameter("expected MODULE:CLASS", param_hint="TARGET")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import {module_name}: {exc}", param_hint="TARGET") from exc
    entity_type = getattr(module, class_name, None)
    if not isinstance(entity_type, type):
        raise typer.BadParameter(f"{class_name} is not a class in {module_name}", param_hint="TARGET")
    return entity_type


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    if settings.dialect == "sqlite":
        typer.echo(f"dialect=sqlite | data_source={settings.data_source}")
    else:
        typer.echo(
            f"dialect=mysql | DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} "
            f"attempts={settings.connect_attempts}"
        )


@app.command()
def ddl(
    target: str = typer.Argument(..., help="Record class as MODULE:CLASS."),
    dialect: Dialect = typer.Option(Dialect.SQLITE, "--dialect", "-d", help="Target dialect."),
) -> None:
    """
    Print the CREATE TABLE statement for a record class.
    """
    entity_type = _load_type(target)
    descriptor = default_registry.descriptor(entity_type)
    typer.echo(builder.create_collection(dialect, descriptor).text)


@app.command()
def sync(
    target: str = typer.Argument(..., help="Record class as MODULE:CLASS."),
) -> None:
    """
    Connect using the configured settings and reconcile the table for a record class.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    entity_type = _load_type(target)
    descriptor = default_registry.descriptor(entity_type)

    with ConnectionBuilder.from_settings(settings).build() as connection:
        plan = reconcile(connection, descriptor)

    if not plan:
        typer.echo(f"{descriptor.table_name} is up to date.")
        return
    for payload in plan:
        typer.echo(payload.text)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
