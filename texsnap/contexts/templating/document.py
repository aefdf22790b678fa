"""
Document assembly.

Turns a CompileRequest into the LaTeX document handed to the compiler. Exactly
one path applies, checked in this order:

    1. FULL mode           -> source verbatim, no substitution
    2. custom template     -> placeholders substituted into the custom template
    3. TIKZ mode           -> built-in drawing template
    4. otherwise           -> built-in math template ($ source $)
"""

from texsnap.contexts.rendering.colors import resolve_background, resolve_text_color
from texsnap.contexts.rendering.request import CompileRequest, RenderMode
from texsnap.contexts.templating.placeholders import build_substitutions, substitute_placeholders
from texsnap.contexts.templating.registry import BuiltinTemplateRegistry

def default_template_text(mode: RenderMode, registry: BuiltinTemplateRegistry) -> str:
    """
    Built-in template for a mode, with its placeholders still in place.

    FULL mode has no template; the math template is returned for it, matching
    what a custom template would replace.
    """
    return registry.render("tikz" if mode is RenderMode.TIKZ else "math")


def render_document(request: CompileRequest, registry: BuiltinTemplateRegistry) -> str:
    """
    Assemble the LaTeX document for a request.

    Args:
        request: Render request
        registry: Built-in template registry supplying the math and TikZ templates

    Returns:
        Complete LaTeX document text
    """
    if request.mode is RenderMode.FULL:
        return request.source

    values = build_substitutions(
        source=request.source,
        text_color=resolve_text_color(request.text_color),
        background=resolve_background(request.background_color),
    )

    if request.custom_template and request.custom_template.strip():
        return substitute_placeholders(request.custom_template, values)

    return substitute_placeholders(default_template_text(request.mode, registry), values)
