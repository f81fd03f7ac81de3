"""entityresolver CLI - Main entry point."""

import logging
import sys
from typing import Annotated

import typer

import entityresolver
from entityresolver.cli.context import CONFIG_DIR_ENVVAR, CLIContext, get_config_dir
from entityresolver.cli.output import OutputFormatter
from entityresolver.exceptions import EntityResolverError

app = typer.Typer(
    name="entityresolver",
    help="Resolve entity documents into renderer-ready descriptors",
    no_args_is_help=True,
)

PrefixOption = Annotated[
    str | None,
    typer.Option("--prefix", help="Prefix for reserved table and column names (empty for none)"),
]
DatabaseOption = Annotated[
    str | None, typer.Option("--db", help="Database type (sql, mongodb, cassandra, ...)")
]
ProdDatabaseOption = Annotated[
    str | None, typer.Option("--prod-db", help="Production database (postgresql, oracle, ...)")
]
BaseNameOption = Annotated[str | None, typer.Option("--base-name", help="Application base name")]
SkipServerOption = Annotated[
    bool, typer.Option("--skip-server", help="Allow reserved Java keywords as entity names")
]


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Annotated[
        str | None,
        typer.Option(
            "--config-dir",
            "-c",
            envvar=CONFIG_DIR_ENVVAR,
            help="Directory holding the <Entity>.json documents",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON (machine-readable)",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log resolution steps to stderr"),
    ] = False,
) -> None:
    """Initialize CLI context with global options."""
    logging.basicConfig(level=logging.INFO if verbose else logging.ERROR, stream=sys.stderr)
    ctx.obj = CLIContext(config_dir=get_config_dir(config_dir), json_output=json_output)


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"entityresolver v{entityresolver.__version__}")


@app.command()
def resolve(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Entity name (e.g., Order)")],
    prefix: PrefixOption = None,
    db: DatabaseOption = None,
    prod_db: ProdDatabaseOption = None,
    base_name: BaseNameOption = None,
    skip_server: SkipServerOption = False,
    regenerate: Annotated[
        bool, typer.Option("--regenerate", help="Do not write the document back")
    ] = False,
) -> None:
    """Resolve an entity and print its descriptor.

    Examples:

        entityresolver resolve Order --prod-db oracle

        entityresolver --json resolve Order --regenerate
    """
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        resolver = cli_ctx.get_resolver(
            jhi_prefix=prefix,
            database_type=db,
            prod_database_type=prod_db,
            base_name=base_name,
            skip_server=skip_server,
            regenerate=regenerate,
        )
        result = resolver.resolve(name)
        formatter.print_descriptor(result.descriptor, result.warnings)
    except EntityResolverError as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


@app.command()
def validate(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Entity name (e.g., Order)")],
    prefix: PrefixOption = None,
    db: DatabaseOption = None,
    prod_db: ProdDatabaseOption = None,
    base_name: BaseNameOption = None,
    skip_server: SkipServerOption = False,
) -> None:
    """Check an entity document without writing anything."""
    cli_ctx: CLIContext = ctx.obj
    formatter = OutputFormatter(cli_ctx.json_output)

    try:
        resolver = cli_ctx.get_resolver(
            jhi_prefix=prefix,
            database_type=db,
            prod_database_type=prod_db,
            base_name=base_name,
            skip_server=skip_server,
        )
        document, warnings = resolver.validate(name)
        formatter.print_validation(document, warnings)
    except EntityResolverError as e:
        formatter.print_error(e)
        raise typer.Exit(code=1)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
