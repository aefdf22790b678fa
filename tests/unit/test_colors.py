"""Unit tests for color resolution."""

import pytest

from texsnap.contexts.rendering.colors import (
    BLACK,
    is_transparent,
    parse_color,
    resolve_background,
    resolve_text_color,
    to_dvipng_color,
)


@pytest.mark.unit
@pytest.mark.parametrize("value", ["00ff7f", "ABCDEF", "123456", "a1B2c3"])
def test_parse_color_canonical_forms(value):
    """Canonical hex is the input uppercased; CSS form adds "#"."""
    color = parse_color(value)

    assert color.hex == value.upper()
    assert color.css == f"#{value.upper()}"


@pytest.mark.unit
def test_parse_color_channels():
    """Channels are decoded from each hex pair."""
    color = parse_color("#FF8001")

    assert (color.red, color.green, color.blue) == (255, 128, 1)


@pytest.mark.unit
def test_parse_color_strips_hash_and_whitespace():
    assert parse_color("  #00ff00 ").hex == "00FF00"


@pytest.mark.unit
@pytest.mark.parametrize("value", ["zzzzzz", "#abc", "#1234567", "", "#", "##123456", None, 123456])
def test_parse_color_invalid(value):
    """Wrong length, non-hex digits, and non-strings yield None."""
    assert parse_color(value) is None


@pytest.mark.unit
@pytest.mark.parametrize("value", ["transparent", " Transparent ", "TRANSPARENT"])
def test_is_transparent(value):
    assert is_transparent(value)


@pytest.mark.unit
@pytest.mark.parametrize("value", ["#ffffff", "transparentish", "", None])
def test_is_not_transparent(value):
    assert not is_transparent(value)


@pytest.mark.unit
def test_to_dvipng_color_trims_trailing_zeros():
    assert to_dvipng_color(parse_color("#FF0033")) == "rgb 1 0 0.2"


@pytest.mark.unit
def test_to_dvipng_color_rounds_to_four_places():
    # 128/255 = 0.50196..., 1/255 = 0.00392...
    assert to_dvipng_color(parse_color("#808001")) == "rgb 0.502 0.502 0.0039"


@pytest.mark.unit
def test_to_dvipng_color_transparent():
    assert to_dvipng_color(None) == "Transparent"


@pytest.mark.unit
def test_resolve_text_color_falls_back_to_black():
    assert resolve_text_color("not a color") == BLACK
    assert resolve_text_color("#ff0000").hex == "FF0000"


@pytest.mark.unit
def test_resolve_background():
    """Transparent and unparsable backgrounds both mean no background."""
    assert resolve_background("transparent") is None
    assert resolve_background("#12") is None
    assert resolve_background("#00ff00").css == "#00FF00"
