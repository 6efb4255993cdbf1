"""CLI entry point for natassert.

Invoked as::

    natassert [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m natassert.cli.main

Commands
--------
explain     Evaluate an expression and explain it if it is falsy
version     Show version information
"""
from __future__ import annotations

import ast
import importlib
import json
import sys
from typing import Any

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

console = Console()
err_console = Console(stderr=True)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def _parse_value(raw: str) -> Any:
    """Read a ``--set`` value as a Python literal, else keep it as a string."""
    try:
        return ast.literal_eval(raw)
    except (ValueError, SyntaxError):
        return raw


def _parse_bindings(pairs: tuple[str, ...]) -> dict[str, Any]:
    bindings: dict[str, Any] = {}
    for pair in pairs:
        name, sep, raw = pair.partition("=")
        name = name.strip()
        if not sep or not name.isidentifier():
            raise click.BadParameter(
                f"expected NAME=VALUE, got {pair!r}", param_hint="--set"
            )
        bindings[name] = _parse_value(raw)
    return bindings


def _import_modules(names: tuple[str, ...]) -> dict[str, Any]:
    namespace: dict[str, Any] = {}
    for name in names:
        try:
            importlib.import_module(name)
        except ImportError as exc:
            raise click.BadParameter(str(exc), param_hint="--import") from exc
        # ``import a.b`` binds ``a``, with ``b`` reachable as an attribute
        top = name.partition(".")[0]
        namespace[top] = sys.modules[top]
    return namespace


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="natassert")
def cli() -> None:
    """Natural-language explanations for failing assertion expressions."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from natassert import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]natassert[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# explain command
# ---------------------------------------------------------------------------


@cli.command(name="explain")
@click.argument("expression")
@click.option(
    "--set",
    "bindings",
    multiple=True,
    metavar="NAME=VALUE",
    help="Bind NAME to VALUE (a Python literal, or a plain string)",
)
@click.option(
    "--import",
    "imports",
    multiple=True,
    metavar="MODULE",
    help="Make MODULE available to the expression, e.g. --import re",
)
@click.option("--label", default="Then", show_default=True, help="Clause label for the message")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "yaml"], case_sensitive=False),
    default="text",
    help="Output format",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file",
)
def explain_command(
    expression: str,
    bindings: tuple[str, ...],
    imports: tuple[str, ...],
    label: str,
    output_format: str,
    config_path: str | None,
) -> None:
    """Evaluate EXPRESSION and explain it if it is falsy.

    Exits 0 when the expression is truthy, 1 when it fails and 2 when it
    cannot be analyzed.

    Examples:

    \b
        natassert explain "a == 2" --set a=1
        natassert explain "re.search('HI', s)" --import re --set s=Hello
    """
    from natassert.analyzer import NaturalAssertion
    from natassert.config import load_settings
    from natassert.errors import NatAssertError

    context = _parse_bindings(bindings)
    namespace = _import_modules(imports)

    try:
        settings = load_settings(config_path)
        assertion = NaturalAssertion.from_source(
            expression, context, namespace=namespace, label=label, settings=settings
        )
        data = assertion.to_dict()
    except SyntaxError as exc:
        err_console.print(f"[red]Syntax error[/red] in expression: {escape(str(exc.msg))}")
        sys.exit(EXIT_INVALID)
    except NatAssertError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(EXIT_INVALID)

    try:
        passed = bool(assertion.run())
    except Exception as exc:  # noqa: BLE001
        err_console.print(f"[red]Error:[/red] expression raised {type(exc).__name__}: {escape(str(exc))}")
        passed = False
    data["passed"] = passed

    fmt = output_format.lower()
    if fmt == "json":
        click.echo(json.dumps(data, indent=2))
    elif fmt == "yaml":
        click.echo(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), nl=False)
    elif passed:
        console.print(f"[green]OK[/green] {escape(expression)} — {escape(str(data['result']))}")
    else:
        console.print(Text(assertion.message().rstrip("\n")))

    sys.exit(EXIT_OK if passed else EXIT_FAILED)


if __name__ == "__main__":
    cli()
