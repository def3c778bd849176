"""
constructlint CLI entry point.
"""
import sys
from typing import Dict, List, Optional, Tuple

import click
from rich.console import Console
from rich.table import Table

from constructlint import __version__, rules
from constructlint.config import LintConfig, load_config
from constructlint.errors import ConstructLintError
from constructlint.loader import is_assembly_file, load, manifest_path
from constructlint.models.diagnostic import Diagnostic, DiagnosticLevel
from constructlint.reporters import json_reporter, markdown, sarif_reporter
from constructlint.rules.cfn_resource import CfnResourceIndex

_LEVEL_ORDER = ["error", "warning", "success", "skipped"]
_LEVEL_COLORS = {
    "error": "bold red",
    "warning": "yellow",
    "success": "green",
    "skipped": "dim",
}


def _print_summary_table(diagnostics: List[Diagnostic], no_color: bool, verbose: bool) -> None:
    """Print a rich table of diagnostics to stderr."""
    tbl = Table(title="Lint Results", show_header=True, header_style="bold")
    tbl.add_column("Level", width=9)
    tbl.add_column("Rule", width=20)
    tbl.add_column("Scope", width=36)
    tbl.add_column("Message")

    for d in diagnostics:
        if not verbose and d.level in (DiagnosticLevel.SUCCESS, DiagnosticLevel.SKIPPED):
            continue
        color = _LEVEL_COLORS.get(d.level.value, "") if not no_color else ""
        tbl.add_row(
            f"[{color}]{d.level.value}[/{color}]" if color else d.level.value,
            d.rule,
            d.scope,
            d.message,
        )

    Console(stderr=True, no_color=no_color).print(tbl)


def _count_by_level(diagnostics: List[Diagnostic]) -> Dict[str, int]:
    return {lvl.value: sum(1 for d in diagnostics if d.level == lvl) for lvl in DiagnosticLevel}


def _merge_config(
    cfg: LintConfig, include: Tuple[str, ...], exclude: Tuple[str, ...]
) -> LintConfig:
    # command-line patterns are added to those from the config file
    cfg.include = list(cfg.include) + list(include)
    cfg.exclude = list(cfg.exclude) + list(exclude)
    return cfg


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """constructlint: structural linter for jsii construct libraries."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "sarif", "markdown"], case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write report to this file (default: stdout).",
)
@click.option(
    "--include", "-i",
    multiple=True,
    help="Only evaluate rules matching CODE[:SCOPE] (wildcards allowed). Repeatable.",
)
@click.option(
    "--exclude", "-x",
    multiple=True,
    help="Skip rules matching CODE[:SCOPE] (wildcards allowed). Repeatable.",
)
@click.option(
    "--config", "config_path",
    type=click.Path(),
    default=None,
    help="Path to a constructlint.yaml file (default: ./constructlint.yaml if present).",
)
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"], case_sensitive=False),
    default="error",
    show_default=True,
    help="Exit with code 1 if any diagnostic at or above this level is reported.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Also list successful and skipped checks.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)
def lint(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    include: Tuple[str, ...],
    exclude: Tuple[str, ...],
    config_path: Optional[str],
    fail_on: str,
    verbose: bool,
    no_color: bool,
) -> None:
    """
    Lint jsii assemblies.

    PATHS are `.jsii` manifests or package directories containing one.
    """
    stderr = Console(stderr=True, no_color=no_color)
    source_label = ", ".join(paths)

    try:
        cfg = _merge_config(load_config(config_path), include, exclude)
    except ConstructLintError as exc:
        stderr.print(f"[red]Config error:[/red] {exc}")
        sys.exit(2)

    index = CfnResourceIndex(stderr if verbose else None)
    linters = rules.build_linters(cfg, index)

    diagnostics: List[Diagnostic] = []
    linted = 0
    for path in paths:
        if not is_assembly_file(manifest_path(path)):
            stderr.print(f"[dim]Skipping non-jsii path:[/dim] {path}")
            continue
        with stderr.status(f"[bold]Linting {path}…"):
            try:
                assembly = load(path)
                diagnostics.extend(rules.run(assembly, cfg, linters))
                linted += 1
            except ConstructLintError as exc:
                stderr.print(f"[red]Error:[/red] {exc}")
                sys.exit(2)

    if not linted:
        stderr.print(f"[red]Error:[/red] no jsii assembly found in {source_label}")
        sys.exit(2)

    counts = _count_by_level(diagnostics)
    stderr.print(
        f"Evaluated [bold]{len(diagnostics)}[/bold] checks: "
        + "  ".join(
            f"[{_LEVEL_COLORS[lvl]}]{lvl}: {counts[lvl]}[/{_LEVEL_COLORS[lvl]}]"
            for lvl in _LEVEL_ORDER
            if counts[lvl] > 0
        )
    )

    fmt = output_format.lower()
    if fmt == "text":
        _print_summary_table(diagnostics, no_color, verbose)
        report_content = "\n".join(
            f"{d.level.value}: {d.qualified_code}: {d.message}"
            for d in diagnostics
            if verbose or d.level in (DiagnosticLevel.ERROR, DiagnosticLevel.WARNING)
        )
    elif fmt == "json":
        report_content = json_reporter.build_report(diagnostics, source_label)
    elif fmt == "sarif":
        report_content = sarif_reporter.build_report(diagnostics, source_label)
    else:
        report_content = markdown.build_report(diagnostics, source_label)

    if output:
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(report_content)
        stderr.print(f"Report written to [bold]{output}[/bold]")
    elif report_content:
        click.echo(report_content)

    # CI gate
    gate_levels = _LEVEL_ORDER[: _LEVEL_ORDER.index(fail_on.lower()) + 1]
    for lvl in gate_levels:
        if counts.get(lvl, 0) > 0:
            stderr.print(
                f"[red]Lint failed:[/red] {counts[lvl]} {lvl}(s) reported (--fail-on {fail_on})."
            )
            sys.exit(1)

    sys.exit(0)


@cli.command("list-rules")
def list_rules() -> None:
    """List every available rule."""
    for linter in rules.build_linters():
        for rule in linter.rules:
            level = "warning" if rule.warning else "error"
            click.echo(f"{linter.name}/{rule.code} ({level}): {rule.message.replace('%s', '<type>')}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
