import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from netcompiler.api.deps import get_compiler
from netcompiler.compiler.modules import DEFAULT_NAMESPACES
from netcompiler.compiler.project import render
from netcompiler.errors import CompilerError
from netcompiler.schemas.params import PARAM_TYPES
from netcompiler.services.artifact_store import ArtifactStore
from netcompiler.services.binder import bind_project

app = typer.Typer(name="netcompiler", help="Compile layer graphs into TensorFlow scripts")
console = Console()


@app.command("compile")
def compile_payload(
    payload: Path = typer.Argument(help="JSON payload with config, dataset and content"),
    user_id: str = typer.Option(..., "-u", "--user-id", help="Owner of the generated model"),
    out: Optional[Path] = typer.Option(None, "-o", "--out", help="Write artifacts under this root"),
):
    """Compile a payload file and print or write the generated scripts."""
    from netcompiler.main import configure_logging

    configure_logging()
    try:
        data = json.loads(payload.read_text(encoding="utf-8"))
        project = bind_project(data, user_id)
        artifacts = get_compiler().compile_project(project)
        if out is not None:
            workdir = ArtifactStore(out).write(project.user_id, artifacts)
            console.print(f"[green]Artifacts written to[/green] {workdir}")
            return
    except (OSError, ValueError, CompilerError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    for name, statements in (
        (artifacts.model_name, artifacts.model),
        (artifacts.trainer_name, artifacts.trainer),
    ):
        console.rule(name)
        console.print(Syntax(render(statements), "python"))


@app.command("layers")
def list_layers():
    """List supported layer types and their parameters."""
    table = Table(title="Layer Types")
    table.add_column("Type", style="bold")
    table.add_column("Parameters")
    for layer_type, param_type in PARAM_TYPES.items():
        table.add_row(layer_type, ", ".join(param_type.model_fields))
    console.print(table)

    ns = Table(title="Namespaces")
    ns.add_column("Category", style="bold")
    ns.add_column("Path")
    for category, path in DEFAULT_NAMESPACES.items():
        ns.add_row(category, path)
    console.print(ns)


@app.command()
def serve():
    """Run the HTTP API."""
    from netcompiler.main import main

    main()


if __name__ == "__main__":
    app()
