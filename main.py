"""Landing-zone deployer CLI entrypoint."""
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import Optional

from landingzone.config.parser import ConfigParser
from landingzone.errors import ConfigurationError, RuleReferenceError
from landingzone.execute.executor import create_executor
from landingzone.execute.models import Action, ExecutionReport, OperationOutcome, OutcomeStatus
from landingzone.plan.compiler import PlanCompiler

app = typer.Typer(help="Landing-zone deployer - compile a YAML landing zone into Azure CLI operations")
console = Console()

STATUS_STYLES = {
    OutcomeStatus.PLANNED: "yellow",
    OutcomeStatus.SUCCEEDED: "green",
    OutcomeStatus.FAILED: "red",
    OutcomeStatus.NOT_ATTEMPTED: "dim",
}


def _print_outcome(outcome: OperationOutcome) -> None:
    if outcome.status == OutcomeStatus.PLANNED:
        # Keep each command on one physical line so it can be copied
        console.print(f"[yellow]\\[PLAN][/] {escape(outcome.detail)}", soft_wrap=True)
    elif outcome.status == OutcomeStatus.SUCCEEDED:
        console.print(f"[green]✔ {outcome.operation.kind.value}:[/] {escape(outcome.operation.name)}")
    else:
        console.print(f"[red]✖ {outcome.operation.kind.value}:[/] {escape(outcome.operation.name)}")


def _print_summary(report: ExecutionReport) -> None:
    table = Table(title="Deployment Summary")
    table.add_column("#", justify="right")
    table.add_column("Operation", style="cyan")
    table.add_column("Name")
    table.add_column("Status")

    for outcome in report.outcomes:
        style = STATUS_STYLES[outcome.status]
        table.add_row(
            str(outcome.index),
            outcome.operation.kind.value,
            outcome.operation.name,
            f"[{style}]{outcome.status.value}[/]",
        )
    console.print(table)


@app.command()
def run(
    action: Action = typer.Argument(Action.PLAN, help="plan: print the az commands; apply: run them"),
    config: str = typer.Argument("landingzone.yaml", help="Path to the landing-zone YAML file"),
    report_path: Optional[str] = typer.Option(None, "--report", "-r", help="Save the execution report as JSON"),
    debug: bool = typer.Option(False, "--debug", help="Print verbose debug information including all Azure CLI commands")
):
    """Plan or apply a landing-zone deployment."""
    console.print(f"[cyan]ℹ Action:[/] {action.value}")
    console.print(f"[cyan]ℹ Config:[/] {config}")
    if action == Action.PLAN:
        console.print("[yellow]⚠ Plan mode: No resources will be created[/]")

    try:
        configuration = ConfigParser.load(config)
        plan = PlanCompiler(configuration, debug=debug).compile()
    except FileNotFoundError:
        console.print(f"[bold red]✖ Configuration file not found: {config}[/]")
        raise typer.Exit(code=1)
    except ConfigurationError as e:
        console.print(f"[bold red]✖ Configuration error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)
    except RuleReferenceError as e:
        console.print(f"[bold red]✖ Reference error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)

    for warning in plan.warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/]")

    console.print(f"[cyan]ℹ Executing {len(plan)} operations...[/]")
    executor = create_executor(action, configuration, debug=debug, on_outcome=_print_outcome)
    report = executor.execute(plan)

    if report_path:
        report.save(report_path)
        console.print(f"[green]Execution report saved to {report_path}[/]")

    if action == Action.APPLY:
        _print_summary(report)

    if report.aborted:
        error = report.error
        console.print(f"[bold red]✖ Deployment aborted at operation {report.aborted_at}: {escape(str(error))}[/]")
        if debug:
            console.print("\n[blue]Debug: Error output:[/]")
            console.print(escape(error.reason))
        raise typer.Exit(code=1)

    console.print("[green]✔ Deployment complete[/]")


if __name__ == "__main__":
    app()
