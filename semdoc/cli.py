"""semdoc CLI — canonicalize, project and compare JSON/YAML documents."""

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from semdoc import __version__
from semdoc.config import EngineConfig
from semdoc.exceptions import SemdocError
from semdoc.logging_setup import setup_logging
from semdoc.tree.codec import DocumentFormat

console = Console()

EXIT_DIFFERENT = 1
EXIT_ERROR = 2

_file_argument = click.Path(exists=True, dir_okay=False, path_type=Path)


def _fail(message: str):
    console.print(f"[red]Error:[/] {escape(message)}")
    raise SystemExit(EXIT_ERROR)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"cannot read {path}: {e}")


def _format(config: EngineConfig, as_json: bool) -> DocumentFormat:
    return DocumentFormat.JSON if as_json else config.fmt


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (overrides SEMDOC_LOG_LEVEL)")
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """semdoc — semantic normalization for JSON/YAML documents.

    Decide whether two configuration documents differ in substance or only
    in key order, whitespace, duration spelling and omitted defaults.
    """
    try:
        config = EngineConfig.from_env()
    except SemdocError as e:
        _fail(str(e))

    if log_level:
        log_level = log_level.strip().upper()
        if not isinstance(logging.getLevelName(log_level), int):
            _fail(f"--log-level is not a logging level: {log_level!r}")
        config.log_level = log_level
    setup_logging(config.log_level)
    ctx.obj = config


# ── Canonicalize ─────────────────────────────────────────────────────


@main.command(name="canonicalize")
@click.argument("path", type=_file_argument)
@click.option("--json", "as_json", is_flag=True, help="Treat input as JSON and emit JSON")
@click.option("--no-durations", is_flag=True, help="Leave duration literals as written")
@click.pass_obj
def canonicalize_cmd(config: EngineConfig, path: Path, as_json: bool, no_durations: bool):
    """Print the canonical (key-sorted, normalized) form of a document."""
    from semdoc.normalize.canonical import canonicalize

    try:
        result = canonicalize(
            _read(path),
            fmt=_format(config, as_json),
            indent=config.indent,
            durations=config.durations and not no_durations,
        )
    except SemdocError as e:
        _fail(str(e))

    click.echo(result, nl=False)


# ── Durations ────────────────────────────────────────────────────────


@main.command(name="durations")
@click.argument("path", type=_file_argument)
def durations_cmd(path: Path):
    """Print a file with every duration literal in minimal form."""
    from semdoc.normalize.durations import normalize_durations

    click.echo(normalize_durations(_read(path)), nl=False)


# ── Project ──────────────────────────────────────────────────────────


@main.command(name="project")
@click.argument("source", type=_file_argument)
@click.argument("template", type=_file_argument)
@click.option("--json", "as_json", is_flag=True, help="Treat inputs as JSON")
@click.pass_obj
def project_cmd(config: EngineConfig, source: Path, template: Path, as_json: bool):
    """Print SOURCE reduced to the keys present in TEMPLATE."""
    from semdoc.projection.projector import project_by_template

    try:
        result = project_by_template(
            _read(source),
            _read(template),
            fmt=_format(config, as_json),
            indent=config.indent,
        )
    except SemdocError as e:
        _fail(str(e))

    click.echo(result, nl=not result.endswith("\n"))


# ── Compare ──────────────────────────────────────────────────────────


@main.command(name="compare")
@click.argument("first", type=_file_argument)
@click.argument("second", type=_file_argument)
@click.option("--json", "as_json", is_flag=True, help="Treat inputs as JSON")
@click.option("--rules", "rules_path", type=_file_argument, default=None, help="Default value rules file")
@click.option("--plain", is_flag=True, help="Only ignore key order and whitespace")
@click.pass_obj
def compare_cmd(
    config: EngineConfig,
    first: Path,
    second: Path,
    as_json: bool,
    rules_path: Path | None,
    plain: bool,
):
    """Compare two documents semantically. Exits 1 when they differ."""
    from semdoc.compare.semantic import semantic_differences
    from semdoc.normalize.defaults import load_rules

    rules = config.rules
    durations = config.durations
    if plain:
        rules, durations = (), False

    try:
        if rules_path is not None and not plain:
            rules = load_rules(rules_path)
        differences = semantic_differences(
            _read(first),
            _read(second),
            fmt=_format(config, as_json),
            rules=rules,
            durations=durations,
        )
    except SemdocError as e:
        _fail(str(e))

    if not differences:
        console.print("[green]Equal[/] — documents are semantically the same")
        return

    console.print(f"[red]Different[/] — {len(differences)} difference(s)")
    for difference in differences:
        console.print(f"  [red]x[/] {escape(difference)}")
    raise SystemExit(EXIT_DIFFERENT)


# ── Drift ────────────────────────────────────────────────────────────


@main.command(name="drift")
@click.argument("declared", type=_file_argument)
@click.argument("observed", type=_file_argument)
@click.option("--json", "as_json", is_flag=True, help="Treat inputs as JSON")
@click.option("--name", default="", help="Name shown in the report")
@click.option("--show-resolved", is_flag=True, help="Print the value a caller should store")
@click.pass_obj
def drift_cmd(
    config: EngineConfig,
    declared: Path,
    observed: Path,
    as_json: bool,
    name: str,
    show_resolved: bool,
):
    """Check DECLARED against OBSERVED for configuration drift.

    Exits 1 on drift and 2 when drift cannot be determined.
    """
    from semdoc.sync.drift import DriftDetector

    detector = DriftDetector.from_config(config)
    if as_json:
        detector.fmt = DocumentFormat.JSON

    report = detector.check(_read(declared), _read(observed), name=name or declared.name)

    if report.has_drift:
        console.print(f"  [red]DRIFT[/] {escape(report.summary())}")
    elif report.undetermined:
        console.print(f"  [yellow]?[/] {escape(report.summary())}")
    else:
        console.print(f"  [green]OK[/] {escape(report.summary())}")
    for detail in report.details:
        console.print(f"    - {escape(detail)}")

    if show_resolved:
        console.print(Panel(escape(report.resolved.rstrip("\n")), title="Resolved"))

    if report.undetermined:
        raise SystemExit(EXIT_ERROR)
    if report.has_drift:
        raise SystemExit(EXIT_DIFFERENT)


# ── Rules ────────────────────────────────────────────────────────────


@main.command(name="rules")
@click.option("--rules", "rules_path", type=_file_argument, default=None, help="Rules file to show")
@click.pass_obj
def rules_cmd(config: EngineConfig, rules_path: Path | None):
    """Show the default value rules applied during comparison."""
    from semdoc.normalize.defaults import load_rules

    rules = config.rules
    if rules_path is not None:
        try:
            rules = load_rules(rules_path)
        except SemdocError as e:
            _fail(str(e))

    if not rules:
        console.print("[yellow]No default value rules configured.[/]")
        return

    table = Table(title=f"Default Value Rules ({len(rules)})")
    table.add_column("Required Fields", style="cyan")
    table.add_column("Default Field", style="green")
    table.add_column("Default Value")

    for rule in rules:
        table.add_row(
            ", ".join(sorted(rule.required_fields)),
            rule.default_field,
            repr(rule.default_value),
        )

    console.print(table)


if __name__ == "__main__":
    main()
