#!/usr/bin/env python3
"""
Command-line interface for managing the named-template store.

The store (outs/templates.json by default) holds reusable snippets that can be
inserted in the editor or used as custom templates when rendering.

Commands:
    list    - List stored templates
    show    - Print one template's source
    add     - Add a template (source from argument or file)
    delete  - Delete a template by id
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from texsnap.config import load_settings
from texsnap.contexts.templating.exceptions import TemplateNotFoundError
from texsnap.contexts.templating.template_store import TemplateStore

app = typer.Typer(
    add_completion=False,
    help="Manage the named-template store",
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _store() -> TemplateStore:
    store = TemplateStore(load_settings().templates_path)
    store.ensure_exists()
    return store


@app.command("list")
def list_command():
    """List stored templates."""
    templates = _store().list_templates()
    if not templates:
        typer.echo("No templates stored.")
        return

    for template in templates:
        preview = template.source.replace("\n", " ")
        if len(preview) > 50:
            preview = preview[:47] + "..."
        typer.echo(f"{template.id}  {template.name:<24} {preview}")


@app.command("show")
def show_command(
    template_id: Annotated[str, typer.Argument(help="Template id")],
):
    """Print a template's source."""
    try:
        typer.echo(_store().get_template(template_id).source)
    except TemplateNotFoundError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("add")
def add_command(
    name: Annotated[str, typer.Argument(help="Template name")],
    source: Annotated[
        Optional[str],
        typer.Argument(help="Template source (omit when using --file)"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read the source from a file", exists=True),
    ] = None,
):
    """Add a template."""
    if (source is None) == (file is None):
        typer.secho("Error: give either a source argument or --file\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    text = file.read_text(encoding="utf-8") if file else source
    template = _store().add_template(name, text)
    typer.secho(f"✓ Added '{template.name}' ({template.id})", fg=typer.colors.GREEN)


@app.command("delete")
def delete_command(
    template_id: Annotated[str, typer.Argument(help="Template id")],
):
    """Delete a template by id."""
    store = _store()
    before = len(store.list_templates())
    remaining = store.delete_template(template_id)
    if len(remaining) == before:
        typer.secho(f"No template with id {template_id}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)
    typer.secho(f"✓ Deleted {template_id} ({len(remaining)} templates left)", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
