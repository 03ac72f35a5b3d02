import pytest

from qrframe.config import DEFAULT_CONFIG, FONT_SIZES
from qrframe.errors import EmptyInput
from qrframe.text import FontMeasurer, fit_text


class TestFitText:
    def test_picks_first_candidate_under_width(self, measure):
        # "abcd" measures 2 * size
        [line] = fit_text(90, "abcd", measure)
        assert line.size == 44
        assert line.width == 88

    def test_candidate_order_is_literal_not_numeric(self, measure):
        # both 46 (92px) and 48 (96px) fit under 97; 46 is probed first
        assert FONT_SIZES[:2] == (46, 48)
        [line] = fit_text(97, "abcd", measure)
        assert line.size == 46

    def test_width_must_be_strictly_less(self, measure):
        [line] = fit_text(92, "abcd", measure)
        assert line.size == 44

    def test_falls_back_to_last_candidate(self):
        [line] = fit_text(10, "wide", lambda text, size: 1_000_000.0)
        assert line.size == 0

    def test_zero_size_always_fits(self, measure):
        [line] = fit_text(1, "a very long caption that never fits", measure)
        assert line.size == 0
        assert line.width == 0

    @pytest.mark.parametrize("width", [1, 5, 17, 40, 99, 150, 333, 1000])
    def test_result_fits_or_is_zero(self, measure, width):
        for line in fit_text(width, "Scan me\nhttps://example.com/path", measure):
            assert line.width < width or line.size == 0

    def test_one_line_per_input_line_in_order(self, measure):
        lines = fit_text(300, "Line1\nLine two\n\nlast", measure)
        assert [line.text for line in lines] == ["Line1", "Line two", "", "last"]

    def test_empty_text_raises(self, measure):
        with pytest.raises(EmptyInput):
            fit_text(100, "", measure)

    def test_alternate_candidate_list(self, measure):
        [line] = fit_text(50, "abcd", measure, font_sizes=(30, 20, 0))
        assert line.size == 20


class TestFontMeasurer:
    def test_zero_size_measures_nothing(self):
        measure = FontMeasurer(DEFAULT_CONFIG)
        assert measure("Hello", 0) == 0.0
        assert measure("", 30) == 0.0

    def test_width_grows_with_size(self):
        measure = FontMeasurer(DEFAULT_CONFIG)
        assert 0 < measure("Hello", 12) < measure("Hello", 40)

    def test_real_fit_respects_bound(self):
        measure = FontMeasurer(DEFAULT_CONFIG)
        [line] = fit_text(120, "Scan me please", measure)
        assert line.width < 120
        assert line.size in FONT_SIZES
