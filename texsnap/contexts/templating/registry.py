from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, Template, TemplateNotFound

from texsnap.config import RenderSettings

BUILTIN_TEMPLATES_PATH = Path(__file__).parent / "builtin"


class BuiltinTemplateRegistry:
    """
    Registry for loading and caching the built-in document templates.

    Templates are stored in texsnap/contexts/templating/builtin/{name}.tex.jinja
    and use custom delimiters to avoid conflicts with LaTeX syntax and with the
    {{ PLACEHOLDER }} tokens they emit:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>

    Rendering a built-in template only fills in the preamble (package lists);
    the result is itself a placeholder template.
    """

    def __init__(self, settings: RenderSettings = None, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            settings: Source of the package lists (defaults to RenderSettings())
            templates_path: Directory of *.tex.jinja files. Defaults to
                           texsnap/contexts/templating/builtin/
        """
        self.settings = settings or RenderSettings()
        self.templates_path = templates_path or BUILTIN_TEMPLATES_PATH
        self._cache: Dict[str, Template] = {}
        self._rendered: Dict[str, str] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Args:
            name: Template name ("math" or "tikz")

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
        """
        if name in self._cache:
            return self._cache[name]

        template_file = f"{name}.tex.jinja"
        try:
            template = self.env.get_template(template_file)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Built-in template '{name}' not found at {self.templates_path / template_file}"
            ) from e

        self._cache[name] = template
        return template

    def render(self, name: str) -> str:
        """
        Render a built-in template's preamble, leaving its placeholders intact.

        Args:
            name: Template name ("math" or "tikz")

        Returns:
            Placeholder template text
        """
        if name not in self._rendered:
            self._rendered[name] = self.get_template(name).render(
                packages=self._packages(name),
                libraries=self.settings.tikz_libraries if name == "tikz" else [],
            )
        return self._rendered[name]

    def _packages(self, name: str) -> List[str]:
        if name == "tikz":
            return self.settings.tikz_packages
        return self.settings.math_packages

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()
        self._rendered.clear()
