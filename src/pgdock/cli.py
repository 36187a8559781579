import logging
import os

import click
from rich.console import Console
from rich.logging import RichHandler

from .core import PgDock
from .errors import DatabaseNotFoundError, PgDockError
from .models import ConnectionConfig
from .services.config_loader import ConfigLoader

console = Console()


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


def _db_name(ctx, db_name):
    return db_name or ctx.obj["config"].database


def _call(operation, *args):
    try:
        return operation(*args)
    except PgDockError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .pgdock.yml if present.",
)
@click.option("--image", required=False, help="Docker image with psql/pg_dump (ex: postgres:11.7-alpine)")
@click.option("--network", required=False, help="Docker network the client container joins")
@click.option("--host", required=False, help="Database host")
@click.option("--port", required=False, type=int, default=None, help="Database port (default: 5432)")
@click.option("--user", required=False, help="Database user, created if missing")
@click.option("--password", required=False, help="Database password")
@click.option("--debug", is_flag=True, default=None, help="Log raw command output and docker commands")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.pass_context
def main(ctx, config, image, network, host, port, user, password, debug, log_file):
    """Create, inspect, import into and drop PostgreSQL databases."""
    logger = logging.getLogger("pgdock")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".pgdock.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except PgDockError as exc:
        raise click.ClickException(str(exc)) from exc

    debug = bool(_resolve_option(debug, config_values, "debug", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    connection = ConnectionConfig(
        image=_resolve_option(image, config_values, "image", default=""),
        network=_resolve_option(network, config_values, "network", default=""),
        host=_resolve_option(host, config_values, "host", default=""),
        port=_resolve_option(port, config_values, "port"),
        user=_resolve_option(user, config_values, "user", default=""),
        password=_resolve_option(password, config_values, "password", default=""),
        database=_resolve_option(None, config_values, "database", default=""),
        debug=debug,
    )

    ctx.obj = {"config": connection, "pgdock": PgDock()}


@main.command()
@click.argument("db_name", required=False)
@click.pass_context
def create(ctx, db_name):
    """Create the user and database if they do not exist yet."""
    db_name = _db_name(ctx, db_name)
    _call(ctx.obj["pgdock"].create, db_name, ctx.obj["config"])
    console.print(f"[green]Database {db_name} is present.[/green]")


@main.command()
@click.argument("db_name", required=False)
@click.pass_context
def exists(ctx, db_name):
    """Exit 0 when the database exists, 1 when it does not."""
    db_name = _db_name(ctx, db_name)
    try:
        ctx.obj["pgdock"].exists(db_name, ctx.obj["config"])
    except DatabaseNotFoundError as exc:
        console.print(f"[yellow]{exc}[/yellow]")
        ctx.exit(1)
    except PgDockError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Database {db_name} exists.[/green]")


@main.command()
@click.argument("db_name", required=False)
@click.pass_context
def terminate(ctx, db_name):
    """Terminate every connection to the database."""
    db_name = _db_name(ctx, db_name)
    _call(ctx.obj["pgdock"].terminate, db_name, ctx.obj["config"])
    console.print(f"[green]Connections to {db_name} terminated.[/green]")


@main.command()
@click.argument("db_name", required=False)
@click.pass_context
def drop(ctx, db_name):
    """Terminate connections and drop the database if it exists."""
    db_name = _db_name(ctx, db_name)
    _call(ctx.obj["pgdock"].drop, db_name, ctx.obj["config"])
    console.print(f"[green]Database {db_name} dropped.[/green]")


@main.command(name="import")
@click.argument("sql_file")
@click.argument("db_name", required=False)
@click.pass_context
def import_sql(ctx, sql_file, db_name):
    """Replace the database with the contents of SQL_FILE."""
    db_name = _db_name(ctx, db_name)
    _call(ctx.obj["pgdock"].import_sql, db_name, sql_file, ctx.obj["config"])
    console.print(f"[green]Imported {sql_file} into {db_name}.[/green]")


@main.command()
@click.argument("db_name", required=False)
@click.option("--output", "output_file", type=click.Path(), default="", help="Write the schema to this file")
@click.pass_context
def dump(ctx, db_name, output_file):
    """Print or save a cleaned schema-only dump."""
    db_name = _db_name(ctx, db_name)
    schema = _call(ctx.obj["pgdock"].schema_dump, db_name, output_file, ctx.obj["config"])
    if output_file:
        console.print(f"[green]Schema of {db_name} written to {output_file}.[/green]")
    else:
        click.echo(schema, nl=False)


if __name__ == "__main__":
    main()
