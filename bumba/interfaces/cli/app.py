"""Click application for the BUMBA CLI.

Commands:
    bumba route COMMAND [DESCRIPTION...]     Route a task and print the plan
    bumba analyze COMMAND [DESCRIPTION...]   Print the intent analysis only
    bumba specialists                        List the capability table

Example:
    $ bumba route implement python flask API with JWT auth
    $ bumba route plan enterprise platform transformation --json
    $ bumba --debug analyze design accessible dashboard ui
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from bumba import __version__
from bumba.config.settings import get_settings
from bumba.core.exceptions import BumbaError
from bumba.interfaces.cli.logging import setup_cli_logging
from bumba.routing.router import Router
from bumba.routing.schemas import DEPARTMENT_ORDER, Intent, RoutingPlan


# =============================================================================
# Module Logger
# =============================================================================

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}

MODE_COLORS = {
    "simple": "green",
    "moderate": "cyan",
    "complex": "yellow",
    "executive": "red",
}

DEPARTMENT_CHOICES = [d.value for d in DEPARTMENT_ORDER]


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    if not sys.stdout.isatty():
        return text
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


def _get_router(ctx: click.Context) -> Router:
    if ctx.obj.get("router") is None:
        try:
            ctx.obj["router"] = Router(settings=get_settings())
        except BumbaError as e:
            raise click.ClickException(str(e)) from e
    return ctx.obj["router"]


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def _hint_options(f):
    """Add the --language and --department routing hint options."""
    f = click.option(
        "--department",
        "-d",
        "departments",
        multiple=True,
        type=click.Choice(DEPARTMENT_CHOICES, case_sensitive=False),
        help="Department to use when no department keyword matches (repeatable)",
    )(f)
    return click.option(
        "--language", "-l", default=None, help="Language to assume when none is named"
    )(f)


def _hint_context(language: Optional[str], departments: tuple[str, ...]) -> dict[str, Any]:
    return {
        "language_hint": language,
        "department_hints": [d.lower() for d in departments],
    }


# =============================================================================
# CLI Application
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="bumba")
@click.option(
    "--debug/--no-debug",
    default=None,
    help="Enable debug logging (default: BUMBA_DEBUG)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to a rotating file",
)
@click.pass_context
def cli(ctx: click.Context, debug: Optional[bool], log_file: Optional[Path]) -> None:
    """BUMBA - route development tasks to departments and specialists."""
    ctx.ensure_object(dict)

    settings = get_settings()
    if debug is None:
        debug = settings.debug
    level = logging.DEBUG if debug else settings.log_level
    setup_cli_logging(level=level, log_file=log_file)
    logger.debug("CLI started (debug=%s, log_file=%s)", debug, log_file)


@cli.command()
@click.argument("command")
@click.argument("description", nargs=-1)
@_hint_options
@click.option("--json", "as_json", is_flag=True, help="Print the plan as JSON")
@click.pass_context
def route(
    ctx: click.Context,
    command: str,
    description: tuple[str, ...],
    language: Optional[str],
    departments: tuple[str, ...],
    as_json: bool,
) -> None:
    """Route a task and print the routing plan.

    COMMAND is the task verb (implement, analyze, design, ...); the rest of
    the arguments form the task description.
    """
    router = _get_router(ctx)
    plan = router.route(command, list(description), _hint_context(language, departments))

    if as_json:
        _echo_json(plan.to_dict())
    else:
        _display_plan(plan)


@cli.command()
@click.argument("command")
@click.argument("description", nargs=-1)
@_hint_options
@click.option("--json", "as_json", is_flag=True, help="Print the intent as JSON")
@click.pass_context
def analyze(
    ctx: click.Context,
    command: str,
    description: tuple[str, ...],
    language: Optional[str],
    departments: tuple[str, ...],
    as_json: bool,
) -> None:
    """Analyze a task and print the intent, without building a plan."""
    router = _get_router(ctx)
    intent = router.analyze(command, list(description), _hint_context(language, departments))

    if as_json:
        _echo_json(intent.model_dump(mode="json"))
    else:
        _display_intent(intent)


@cli.command()
@click.option(
    "--department",
    "-d",
    default=None,
    type=click.Choice(DEPARTMENT_CHOICES, case_sensitive=False),
    help="Only list specialists of this department",
)
@click.pass_context
def specialists(ctx: click.Context, department: Optional[str]) -> None:
    """List the specialists in the capability table."""
    router = _get_router(ctx)
    tables = router.tables

    for dept in DEPARTMENT_ORDER:
        if department and dept.value != department.lower():
            continue
        ids = tables.specialists_for_department(dept)
        if not ids:
            continue
        click.echo(colorize(dept.value.upper(), "cyan"))
        for specialist_id in ids:
            capability = tables.capabilities[specialist_id]
            model = router.settings.models.model_for_task_type(capability.task_type)
            click.echo(f"  {specialist_id:<28} {capability.task_type.value:<10} {model}")
        click.echo()


# =============================================================================
# Display Helpers
# =============================================================================


def _display_intent(intent: Intent) -> None:
    click.echo(f"{colorize('Intent:', 'bold')} {intent.primary_intent.value}")
    click.echo(f"{colorize('Departments:', 'bold')} {', '.join(d.value for d in intent.departments)}")
    if intent.specialists:
        click.echo(f"{colorize('Specialists:', 'bold')} {', '.join(intent.specialists)}")
    if intent.explicit_language:
        click.echo(f"{colorize('Language:', 'bold')} {intent.explicit_language}")
    if intent.patterns:
        click.echo(f"{colorize('Patterns:', 'bold')} {', '.join(intent.pattern_names)}")
    click.echo(f"{colorize('Complexity:', 'bold')} {intent.complexity:.2f}")
    click.echo(f"{colorize('Confidence:', 'bold')} {intent.confidence:.2f}")
    if intent.is_executive_level:
        click.echo(colorize("Executive-level task", "red"))


def _display_plan(plan: RoutingPlan) -> None:
    mode = plan.mode.value
    click.echo(f"{colorize('Mode:', 'bold')} {colorize(mode.upper(), MODE_COLORS.get(mode, 'reset'))}")
    click.echo(f"{colorize('Priority:', 'bold')} {plan.priority}")
    click.echo(f"{colorize('Source:', 'bold')} {plan.source}")
    click.echo()
    _display_intent(plan.intent)

    if plan.specialists:
        click.echo()
        click.echo(colorize("SPECIALISTS", "cyan"))
        for specialist in plan.specialists:
            click.echo(f"  {specialist.id:<28} {specialist.confidence:.2f}")

    click.echo()
    click.echo(colorize("AGENTS", "cyan"))
    for agent in plan.execution.agents:
        tier = " (claude max)" if agent.using_claude_max else ""
        click.echo(f"  {agent.name:<28} {agent.role.value:<10} {agent.model}{tier}")

    if plan.recommendations:
        click.echo()
        click.echo(colorize("RECOMMENDATIONS", "cyan"))
        for note in plan.recommendations:
            click.echo(f"  - {note}")

    if plan.suggestions:
        click.echo()
        click.echo(colorize("SUGGESTIONS", "yellow"))
        for hint in plan.suggestions:
            click.echo(f"  - {hint}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
