from __future__ import annotations

import logging
import pathlib
from typing import Optional

import typer
import structlog
from rich.console import Console
from rich.table import Table

from .config import IdentifierFamily, IdCheckConfig, NormalizeOptions, load_config
from .engine.dispatcher import Validator

console = Console()
log = structlog.get_logger()
app = typer.Typer(add_completion=False, no_args_is_help=True, help="idcheck: identifier format and checksum validation")


def version_callback(value: bool):
    if value:
        from . import __version__
        console.print(f"idcheck {__version__}")
        raise typer.Exit()


def _validator(ctx: typer.Context) -> Validator:
    cfg: IdCheckConfig = ctx.find_root().obj["config"]
    return Validator(cfg.validator)


def _report(valid: bool, label: str) -> None:
    if valid:
        console.print(f"[green]valid[/green] {label}")
    else:
        console.print(f"[red]invalid[/red] {label}")
        raise typer.Exit(code=1)


@app.callback()
def common(
    ctx: typer.Context,
    config: Optional[pathlib.Path] = typer.Option(None, "--config", help="Path to .idcheck.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logs"),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
):
    """Global options (config, verbosity)."""
    structlog.configure(
        processors=[structlog.processors.add_log_level, structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
    )
    ctx.obj = {"config": load_config(config) if config else IdCheckConfig()}
    if verbose:
        log.info("verbose_enabled")


@app.command()
def validate(
    ctx: typer.Context,
    family: IdentifierFamily = typer.Argument(..., help="Identifier family", case_sensitive=False),
    country: str = typer.Argument(..., help="Two-letter country code"),
    value: str = typer.Argument(..., help="Value to validate"),
    lower_case_ok: bool = typer.Option(False, "--lower-case-ok", help="Upper-case the country code before lookup"),
    strip_whitespace: Optional[bool] = typer.Option(None, "--strip-whitespace/--keep-whitespace"),
    strip_minus: Optional[bool] = typer.Option(None, "--strip-minus/--keep-minus"),
    strip_slash: Optional[bool] = typer.Option(None, "--strip-slash/--keep-slash"),
):
    """Validate VALUE as a FAMILY identifier of COUNTRY."""
    v = _validator(ctx)
    options = None
    flags = {"strip_whitespace": strip_whitespace, "strip_minus": strip_minus, "strip_slash": strip_slash}
    if any(f is not None for f in flags.values()):
        # Explicit flags override the family defaults one by one.
        base = v.cfg.options_for(family.value).model_dump()
        base.update({k: f for k, f in flags.items() if f is not None})
        options = NormalizeOptions(**base)
    ok = v.validate(family, country, value, options=options, allow_lower_case_country_code=lower_case_ok or None)
    _report(ok, f"{family.value} {country} {value}")


@app.command()
def check(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help="Identifier kind (isbn13, gtin13, iban, bic, ...)"),
    value: str = typer.Argument(..., help="Value to validate"),
):
    """Validate an identifier that carries no country field."""
    v = _validator(ctx)
    if kind not in v.kinds():
        raise typer.BadParameter(f"kind must be one of: {', '.join(v.kinds())}")
    _report(v.check(kind, value), f"{kind} {value}")


@app.command()
def countries(
    ctx: typer.Context,
    family: IdentifierFamily = typer.Argument(..., help="Identifier family", case_sensitive=False),
):
    """List the countries that have rules for FAMILY."""
    console.print(" ".join(_validator(ctx).countries(family)))


@app.command()
def families():
    """List identifier families and country-less kinds."""
    table = Table("name", "scope")
    for f in IdentifierFamily:
        table.add_row(f.value, "country")
    for k in Validator.kinds():
        table.add_row(k, "standard")
    console.print(table)
