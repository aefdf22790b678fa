#!/usr/bin/env python3
"""
Snippet Rendering CLI

Renders a LaTeX snippet to PNG or SVG through the same pipeline as the server.

Commands:
    render         - Render a snippet (argument or file) to an image file
    show-template  - Print the built-in template for a mode

Examples:\n

    render_snippet.py render "E = mc^2" -o emc2.png                  # Math snippet to PNG

    render_snippet.py render --file drawing.tex --tikz -o fig.svg    # TikZ drawing to SVG

    render_snippet.py render "x^2" --format svg --bg "#FFFFFF"       # SVG with white background

    render_snippet.py show-template --tikz                           # Built-in TikZ template
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from texsnap.config import load_settings
from texsnap.contexts.rendering.compiler import compile_snippet
from texsnap.contexts.rendering.exceptions import RenderError
from texsnap.contexts.rendering.request import CompileRequest, OutputKind, RenderMode
from texsnap.contexts.rendering.workspace import WorkspaceManager, prepare_scratch_dir
from texsnap.contexts.templating.document import default_template_text
from texsnap.contexts.templating.exceptions import TemplateNotFoundError
from texsnap.contexts.templating.registry import BuiltinTemplateRegistry
from texsnap.contexts.templating.template_store import TemplateStore
from texsnap.utils.logger import setup_logger
from texsnap.utils.timestamp import now

app = typer.Typer(
    help="Render LaTeX snippets to PNG or SVG images",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    snippet: Annotated[
        Optional[str],
        typer.Argument(help="LaTeX snippet (omit when using --file)"),
    ] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Read the snippet from a file", exists=True),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output image (default: snippet.<png|svg>)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: png or svg"),
    ] = "png",
    color: Annotated[
        str,
        typer.Option("--color", "-c", help="Text color (hex)"),
    ] = "#000000",
    background: Annotated[
        str,
        typer.Option("--bg", help="Background color (hex) or 'transparent'"),
    ] = "transparent",
    dpi: Annotated[
        Optional[int],
        typer.Option("--dpi", "-d", help="Resolution for PNG output", min=1),
    ] = None,
    full: Annotated[
        bool,
        typer.Option("--full", help="Snippet is a complete LaTeX document"),
    ] = False,
    tikz: Annotated[
        bool,
        typer.Option("--tikz", help="Snippet is a TikZ drawing (always SVG)"),
    ] = False,
    template_file: Annotated[
        Optional[Path],
        typer.Option("--template-file", help="Custom template with {{ PLACEHOLDER }} tokens", exists=True),
    ] = None,
    template_id: Annotated[
        Optional[str],
        typer.Option("--template-id", help="Use a stored template as the custom template"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log to console and a timestamped log directory"),
    ] = False,
):
    """
    Render a snippet to an image file.

    Examples:\n

        $ render_snippet.py render "\\frac{a}{b}" -o frac.png --dpi 600

        $ render_snippet.py render --file doc.tex --full -o doc.svg --format svg
    """
    if (snippet is None) == (file is None):
        typer.secho("Error: give either a snippet argument or --file\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output_format.lower() not in ("png", "svg"):
        typer.secho(f"Error: unknown format '{output_format}'\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    settings = load_settings()
    if verbose:
        setup_logger(context_name="render", log_dir=settings.logs_path / f"render_{now()}")

    source = file.read_text(encoding="utf-8") if file else snippet

    custom_template = template_file.read_text(encoding="utf-8") if template_file else None
    if template_id:
        store = TemplateStore(settings.templates_path)
        try:
            custom_template = store.get_template(template_id).source
        except TemplateNotFoundError as e:
            typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

    request = CompileRequest(
        source=source,
        output_kind=OutputKind.VECTOR if output_format.lower() == "svg" else OutputKind.RASTER,
        text_color=color,
        background_color=background,
        resolution=dpi or settings.default_resolution,
        mode=RenderMode.from_flags(full=full, tikz=tikz),
        custom_template=custom_template,
    )
    output_kind = request.effective_output_kind
    suffix = ".svg" if output_kind is OutputKind.VECTOR else ".png"
    if output is None:
        output = Path(f"snippet{suffix}")
    elif output.suffix.lower() != suffix:
        typer.secho(f"Note: writing {output_kind.value} output to {output}", fg=typer.colors.YELLOW)

    manager = WorkspaceManager(prepare_scratch_dir(settings.scratch_path))
    try:
        artifact = compile_snippet(
            request,
            manager=manager,
            settings=settings,
            registry=BuiltinTemplateRegistry(settings),
        )
    except RenderError as e:
        typer.secho(f"✗ Render failed ({e.stage})", fg=typer.colors.RED, bold=True)
        typer.secho(e.diagnostic, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    output.write_bytes(artifact.data)
    typer.secho(f"✓ Rendered {output} ({len(artifact.data)} bytes)", fg=typer.colors.GREEN, bold=True)


@app.command("show-template")
def show_template_command(
    tikz: Annotated[
        bool,
        typer.Option("--tikz", help="Show the TikZ drawing template instead of the math template"),
    ] = False,
):
    """Print a built-in template with its {{ PLACEHOLDER }} tokens, as a starting point for custom templates."""
    settings = load_settings()
    mode = RenderMode.TIKZ if tikz else RenderMode.MATH
    typer.echo(default_template_text(mode, BuiltinTemplateRegistry(settings)))


if __name__ == "__main__":
    app()
