"""Unit tests for the HTTP surface, with the fake toolchain in place of TeX."""

import base64

import pytest
from fastapi.testclient import TestClient

from texsnap.contexts.serving.app import create_app
from texsnap.contexts.serving.models import CompilePayload
from texsnap.contexts.rendering.request import OutputKind, RenderMode


@pytest.fixture
def client(settings, toolchain):
    app = create_app(settings, runner=toolchain, configure_logging=False)
    with TestClient(app) as client:
        yield client


def _decode(image: str) -> bytes:
    _, encoded = image.split(",", 1)
    return base64.b64decode(encoded)


@pytest.mark.unit
def test_startup_empties_scratch_dir(settings, toolchain):
    settings.scratch_path.mkdir(parents=True)
    (settings.scratch_path / "leftover.tex").write_text("x")

    with TestClient(create_app(settings, runner=toolchain, configure_logging=False)):
        assert list(settings.scratch_path.iterdir()) == []


@pytest.mark.unit
def test_compile_png(client):
    response = client.post("/api/compile", json={"latex": "x^2"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert "error" not in body
    assert body["image"].startswith("data:image/png;base64,")
    assert _decode(body["image"]).startswith(b"\x89PNG")


@pytest.mark.unit
def test_compile_svg_with_background(client):
    response = client.post("/api/compile", json={"latex": "x", "format": "svg", "bgColor": "#00FF00"})

    body = response.json()
    assert body["image"].startswith("data:image/svg+xml;base64,")
    assert b'fill="#00FF00"' in _decode(body["image"])


@pytest.mark.unit
def test_compile_tikz_returns_svg(client):
    response = client.post("/api/compile", json={"latex": r"\draw (0,0);", "isTikzMode": True})

    assert response.json()["image"].startswith("data:image/svg+xml;base64,")


@pytest.mark.unit
def test_compile_failure_shape(client, toolchain):
    toolchain.log_content = "Some info\n! Undefined control sequence.\nmore info\n"

    response = client.post("/api/compile", json={"latex": r"\undefined"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "! Undefined control sequence."}


@pytest.mark.unit
@pytest.mark.parametrize("payload", [{"format": "png"}, {"latex": 123}, {"latex": None}])
def test_compile_invalid_latex_uses_failure_shape(client, payload):
    """A missing or non-string snippet is rejected with the usual failure body."""
    response = client.post("/api/compile", json=payload)

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("latex: ")
    assert "detail" not in body


@pytest.mark.unit
def test_template_payload_errors_use_failure_shape(client):
    response = client.post("/api/templates", json={"name": "No source"})

    assert response.status_code == 422
    assert response.json() == {"success": False, "error": "latex: Field required"}


@pytest.mark.unit
def test_compile_with_stored_template(client, toolchain):
    added = client.post("/api/templates", json={"name": "Boxed", "latex": "BOXED[{{LATEX}}]"})
    template_id = added.json()["templates"][-1]["id"]

    response = client.post("/api/compile", json={"latex": "y", "templateId": template_id})

    assert response.status_code == 200
    assert b"BOXED[y]" in _decode(response.json()["image"])


@pytest.mark.unit
def test_compile_with_unknown_template(client):
    response = client.post("/api/compile", json={"latex": "y", "templateId": "nope"})

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.unit
def test_scratch_dir_empty_after_requests(client, settings, toolchain):
    client.post("/api/compile", json={"latex": "ok"})
    client.post("/api/compile", json={"latex": r"\undefined"})

    assert list(settings.scratch_path.iterdir()) == []


@pytest.mark.unit
def test_templates_crud(client):
    listed = client.get("/api/templates").json()
    assert [t["name"] for t in listed] == ["Basic Equation", "Fraction"]

    added = client.post("/api/templates", json={"name": "Sum", "latex": r"\sum"}).json()
    assert added["success"] is True
    new_id = added["templates"][-1]["id"]
    assert added["templates"][-1] == {"id": new_id, "name": "Sum", "latex": r"\sum"}

    deleted = client.delete(f"/api/templates/{new_id}").json()
    assert deleted["success"] is True
    assert new_id not in [t["id"] for t in deleted["templates"]]


# -----------------------------------------
# Payload defaults
# -----------------------------------------
@pytest.mark.unit
def test_payload_defaults():
    request = CompilePayload(latex="x").to_request(default_resolution=300)

    assert request.output_kind is OutputKind.RASTER
    assert request.text_color == "#000000"
    assert request.background_color == "transparent"
    assert request.resolution == 300
    assert request.mode is RenderMode.MATH
    assert request.custom_template is None


@pytest.mark.unit
@pytest.mark.parametrize("dpi", [0, -5, "abc", None, True, [300]])
def test_payload_bad_dpi_defaults(dpi):
    request = CompilePayload(latex="x", dpi=dpi).to_request(default_resolution=300)

    assert request.resolution == 300


@pytest.mark.unit
def test_payload_numeric_string_dpi():
    assert CompilePayload(latex="x", dpi="600").to_request(300).resolution == 600


@pytest.mark.unit
@pytest.mark.parametrize("fmt, kind", [("svg", OutputKind.VECTOR), ("SVG", OutputKind.VECTOR), ("vector", OutputKind.VECTOR), ("jpeg", OutputKind.RASTER), (42, OutputKind.RASTER)])
def test_payload_format(fmt, kind):
    assert CompilePayload(latex="x", format=fmt).to_request(300).output_kind is kind


@pytest.mark.unit
def test_payload_non_string_colors_default():
    request = CompilePayload(latex="x", color=123, bgColor=None).to_request(300)

    assert request.text_color == "#000000"
    assert request.background_color == "transparent"


@pytest.mark.unit
def test_payload_full_mode_wins():
    request = CompilePayload(latex="x", isFullMode=True, isTikzMode=True).to_request(300)

    assert request.mode is RenderMode.FULL


@pytest.mark.unit
def test_payload_blank_custom_template_dropped():
    assert CompilePayload(latex="x", customTemplate="   ").to_request(300).custom_template is None


@pytest.mark.unit
def test_payload_stored_template_overrides_inline():
    payload = CompilePayload(latex="x", customTemplate="inline {{LATEX}}")

    assert payload.to_request(300, custom_template="stored").custom_template == "stored"
