"""Unit tests for FontBook font caching."""

import gc
import weakref

import pytest

from resumex.contexts.rendering.layout import FontBook


@pytest.mark.unit
def test_fonts_cached_per_size_and_weight():
    """Test a font is loaded once per (size, weight) and sizes are clamped to 1px."""
    fonts = FontBook(regular_path=None, bold_path=None)

    assert fonts.get(14) is fonts.get(14.6)
    assert fonts.get(14) is not fonts.get(15)
    assert fonts.get(0) is fonts.get(1)
    assert fonts.text_width("", 14) == 0.0
    assert fonts.text_width("abc", 14) > 0


@pytest.mark.unit
def test_cache_does_not_outlive_font_book():
    """Test a discarded FontBook is freed along with its cached fonts."""
    fonts = FontBook(regular_path=None, bold_path=None)
    fonts.get(12)
    ref = weakref.ref(fonts)

    del fonts
    gc.collect()

    assert ref() is None
