"""Typer CLI for the VarOmeter client.

Usage:
    # Convert a VCF to a textDataset CSV
    varometer convert sample.vcf.gz --max-variants 200 -o dataset.csv

    # Full flow: convert -> project -> experiment -> run -> wait
    varometer submit sample.vcf --project-title "VCF test" --params params.json

    # Wait on an experiment whose run is already in progress
    varometer wait 65f0c1e2a9 --poll-seconds 60

The API key is read from --api-key or ENIOS_API_KEY.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from varometer.client import VarOmeterClient
from varometer.config import Settings
from varometer.converter import DEFAULT_MAX_VARIANTS, vcf_to_text_dataset
from varometer.endpoints import create_experiment, create_project, delete_project
from varometer.exceptions import VarOmeterError
from varometer.logging_config import setup_logging
from varometer.orchestrator import (
    DEFAULT_RUN_POLL_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_WAIT_POLL_SECONDS,
    RunWaiter,
)
from varometer.utils import EXPERIMENT_ID_CANDIDATES, PROJECT_ID_CANDIDATES, extract_id

app = typer.Typer(
    name="varometer",
    help="Convert VCF files and run VarOmeter experiments",
    add_completion=False,
)

console = Console()

ApiKeyOption = Annotated[
    str | None,
    typer.Option("--api-key", help="enios API key (default: $ENIOS_API_KEY)"),
]
BaseUrlOption = Annotated[
    str | None,
    typer.Option("--base-url", help="API host (default: $VAROMETER_BASE_URL or dev host)"),
]
LogDirOption = Annotated[
    Path | None,
    typer.Option("--log-dir", help="Write a detailed log file under this directory"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable verbose logging"),
]


def _init_logging(log_dir: Path | None, verbose: bool) -> None:
    setup_logging(
        log_dir=str(log_dir) if log_dir else None,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]ERROR:[/red] {escape(str(error))}")
    raise typer.Exit(code=1)


def _load_parameters(params_file: Path | None) -> dict[str, Any]:
    if params_file is None:
        return {}
    try:
        payload = json.loads(params_file.read_text())
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"invalid JSON: {e}", param_hint="--params") from e
    if not isinstance(payload, dict):
        raise typer.BadParameter("parameters file must contain a JSON object", param_hint="--params")
    return payload


def _count_rows(text_dataset: str) -> int:
    return len(text_dataset.splitlines()) - 1


def _write_result(result: Any, output: Path | None) -> None:
    if isinstance(result, str):
        text = result
    else:
        text = json.dumps(result, indent=2)

    if output is not None:
        output.write_text(text)
        console.print(f"Results written to {output}")
    elif isinstance(result, str):
        console.print(text)
    else:
        console.print_json(text)


@app.command()
def convert(
    vcf: Annotated[
        Path,
        typer.Argument(help="VCF file (.vcf or .vcf.gz)", dir_okay=False),
    ],
    p_value: Annotated[
        float,
        typer.Option("--p-value", help="P-value assigned to every variant"),
    ] = 1.0,
    max_variants: Annotated[
        int,
        typer.Option("--max-variants", "-n", help="Maximum variants to convert", min=0),
    ] = DEFAULT_MAX_VARIANTS,
    all_variants: Annotated[
        bool,
        typer.Option("--all", help="Convert every variant (ignores --max-variants)"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the CSV here instead of stdout"),
    ] = None,
) -> None:
    """Convert a VCF file into a VarOmeter textDataset CSV."""
    try:
        text = vcf_to_text_dataset(
            vcf,
            p_value=p_value,
            max_variants=None if all_variants else max_variants,
        )
    except VarOmeterError as e:
        _fail(e)

    if output is None:
        typer.echo(text)
    else:
        output.write_text(text + "\n")
        console.print(f"Wrote {_count_rows(text)} variants to {output}")


@app.command()
def submit(
    vcf: Annotated[
        Path,
        typer.Argument(help="VCF file (.vcf or .vcf.gz)", exists=True, dir_okay=False),
    ],
    project_title: Annotated[
        str,
        typer.Option("--project-title", help="Title for the new project"),
    ],
    project_description: Annotated[
        str,
        typer.Option("--project-description", help="Project description"),
    ] = "",
    experiment_title: Annotated[
        str,
        typer.Option("--experiment-title", help="Experiment title"),
    ] = "VCF-derived VarOmeter experiment",
    experiment_description: Annotated[
        str,
        typer.Option("--experiment-description", help="Experiment description"),
    ] = "Converted VCF -> GWAS CSV textDataset",
    params_file: Annotated[
        Path | None,
        typer.Option(
            "--params",
            help="JSON file with extra experiment parameters",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    p_value: Annotated[
        float,
        typer.Option("--p-value", help="P-value assigned to every variant"),
    ] = 1.0,
    max_variants: Annotated[
        int,
        typer.Option("--max-variants", "-n", help="Maximum variants to upload", min=0),
    ] = DEFAULT_MAX_VARIANTS,
    poll_seconds: Annotated[
        float,
        typer.Option("--poll-seconds", help="Seconds between result polls", min=0),
    ] = DEFAULT_RUN_POLL_SECONDS,
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Total seconds to wait for results", min=0),
    ] = DEFAULT_TIMEOUT_SECONDS,
    no_wait: Annotated[
        bool,
        typer.Option("--no-wait", help="Create the experiment and exit without running it"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write final results JSON here"),
    ] = None,
    api_key: ApiKeyOption = None,
    base_url: BaseUrlOption = None,
    log_dir: LogDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a project and experiment from a VCF, run it and wait for results."""
    _init_logging(log_dir, verbose)
    parameters = _load_parameters(params_file)

    try:
        settings = Settings.from_env(api_key=api_key, base_url=base_url)
        with VarOmeterClient(settings) as client:
            console.print(f"API endpoint:   {settings.base_url}")

            text_dataset = vcf_to_text_dataset(vcf, p_value=p_value, max_variants=max_variants)
            console.print(f"Variants:       {_count_rows(text_dataset)}")

            project = create_project(client, project_title, project_description)
            project_id = extract_id(project, PROJECT_ID_CANDIDATES)
            console.print(f"Project ID:     {project_id}")

            experiment = create_experiment(
                client,
                title=experiment_title,
                project_id=project_id,
                text_dataset=text_dataset,
                description=experiment_description,
                parameters=parameters,
            )
            experiment_id = extract_id(experiment, EXPERIMENT_ID_CANDIDATES)
            console.print(f"Experiment ID:  {experiment_id}\n")

            if no_wait:
                console.print("Experiment created. Not running it (--no-wait)")
                return

            waiter = RunWaiter(client, poll_seconds=poll_seconds, timeout_seconds=timeout)
            final = waiter.run_and_wait(experiment_id)
    except VarOmeterError as e:
        _fail(e)

    console.print("[green]VarOmeter run completed[/green]")
    _write_result(final, output)


@app.command()
def wait(
    experiment_id: Annotated[str, typer.Argument(help="Experiment ID")],
    poll_seconds: Annotated[
        float,
        typer.Option("--poll-seconds", help="Seconds between result polls", min=0),
    ] = DEFAULT_WAIT_POLL_SECONDS,
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Total seconds to wait for results", min=0),
    ] = DEFAULT_TIMEOUT_SECONDS,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write final results JSON here"),
    ] = None,
    api_key: ApiKeyOption = None,
    base_url: BaseUrlOption = None,
    log_dir: LogDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Wait for results of an experiment that is already running."""
    _init_logging(log_dir, verbose)

    try:
        settings = Settings.from_env(api_key=api_key, base_url=base_url)
        with VarOmeterClient(settings) as client:
            waiter = RunWaiter(client, poll_seconds=poll_seconds, timeout_seconds=timeout)
            final = waiter.wait(experiment_id)
    except VarOmeterError as e:
        _fail(e)

    console.print("[green]VarOmeter run completed[/green]")
    _write_result(final, output)


@app.command("delete-project")
def delete_project_command(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    api_key: ApiKeyOption = None,
    base_url: BaseUrlOption = None,
) -> None:
    """Delete a project."""
    try:
        settings = Settings.from_env(api_key=api_key, base_url=base_url)
        with VarOmeterClient(settings) as client:
            delete_project(client, project_id)
    except VarOmeterError as e:
        _fail(e)

    console.print(f"Deleted project {project_id}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
