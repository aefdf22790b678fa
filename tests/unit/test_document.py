"""Unit tests for document assembly and the built-in template registry."""

import pytest
from jinja2 import TemplateNotFound

from texsnap.config import RenderSettings
from texsnap.contexts.rendering.request import CompileRequest, RenderMode
from texsnap.contexts.templating.document import default_template_text, render_document
from texsnap.contexts.templating.registry import BuiltinTemplateRegistry


@pytest.fixture
def registry():
    return BuiltinTemplateRegistry(RenderSettings())


@pytest.mark.unit
def test_full_mode_returns_source_verbatim(registry):
    """FULL mode ignores custom templates and colors entirely."""
    source = "\\documentclass{article}\n\\begin{document}{{LATEX}} x\\end{document}\n"
    request = CompileRequest(
        source=source,
        mode=RenderMode.FULL,
        text_color="#FF0000",
        background_color="#00FF00",
        custom_template="ignored {{LATEX}}",
    )

    assert render_document(request, registry) == source


@pytest.mark.unit
def test_custom_template_substitution(registry):
    request = CompileRequest(
        source="a+b",
        text_color="#ff0000",
        custom_template="[{{LATEX}}|{{ COLOR }}|{{COLOR_HEX}}|{{BG_COLOR}}|{{MISSING}}]",
    )

    assert render_document(request, registry) == "[a+b|FF0000|#FF0000||{{MISSING}}]"


@pytest.mark.unit
def test_custom_template_used_in_tikz_mode(registry):
    request = CompileRequest(source="x", mode=RenderMode.TIKZ, custom_template="T:{{LATEX}}")

    assert render_document(request, registry) == "T:x"


@pytest.mark.unit
@pytest.mark.parametrize("blank", ["", "   \n\t"])
def test_blank_custom_template_falls_back_to_builtin(registry, blank):
    request = CompileRequest(source="x^2", custom_template=blank)

    assert "$ x^2 $" in render_document(request, registry)


@pytest.mark.unit
def test_math_template(registry):
    request = CompileRequest(source=r"\frac{a}{b}", text_color="#336699")
    document = render_document(request, registry)

    assert document.startswith(r"\documentclass[preview]{standalone}")
    assert r"\usepackage{amsmath,amssymb,amsfonts,mathtools}" in document
    assert r"\usepackage{xcolor}" in document
    assert r"\color[HTML]{336699}" in document
    assert r"$ \frac{a}{b} $" in document
    assert r"\pagecolor" not in document
    assert "{{" not in document


@pytest.mark.unit
def test_math_template_with_background(registry):
    request = CompileRequest(source="x", background_color="#00ff00")

    assert r"\pagecolor[HTML]{00FF00}" in render_document(request, registry)


@pytest.mark.unit
def test_invalid_text_color_defaults_to_black(registry):
    request = CompileRequest(source="x", text_color="red")

    assert r"\color[HTML]{000000}" in render_document(request, registry)


@pytest.mark.unit
def test_tikz_template(registry):
    source = r"\begin{tikzpicture}\draw (0,0) -- (1,1);\end{tikzpicture}"
    request = CompileRequest(source=source, mode=RenderMode.TIKZ)
    document = render_document(request, registry)

    assert r"\documentclass[tikz]{standalone}" in document
    assert "tikz" in document.split(r"\begin{document}")[0]
    assert r"\usetikzlibrary{arrows.meta,positioning,calc}" in document
    assert source in document
    assert "$" not in document


@pytest.mark.unit
def test_package_lists_come_from_settings():
    settings = RenderSettings(math_packages=["amsmath", "bm"])
    document = render_document(CompileRequest(source="x"), BuiltinTemplateRegistry(settings))

    assert r"\usepackage{amsmath,bm}" in document


@pytest.mark.unit
@pytest.mark.parametrize("mode", [RenderMode.MATH, RenderMode.TIKZ])
def test_default_template_keeps_placeholders(registry, mode):
    text = default_template_text(mode, registry)

    for token in ("{{LATEX}}", "{{COLOR}}", "{{COLOR_HEX}}", "{{BG_FILL}}"):
        assert token in text


@pytest.mark.unit
def test_registry_caches_templates(registry):
    first = registry.get_template("math")

    assert registry.get_template("math") is first


@pytest.mark.unit
def test_registry_missing_template(registry):
    with pytest.raises(TemplateNotFound):
        registry.get_template("nonexistent")


@pytest.mark.unit
def test_registry_clear_cache(registry):
    registry.render("math")
    registry.clear_cache()

    assert registry._cache == {}
    assert registry._rendered == {}
