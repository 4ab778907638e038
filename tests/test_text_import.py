"""Tests for pasted text parsing."""

from sheetcraft.generation import fit_rows, parse_pasted_rows


class TestParsePastedRows:
    """Test splitting pasted spreadsheet text."""

    def test_tab_separated(self):
        rows = parse_pasted_rows("Aarav\t25\tMumbai\nPriya\t30\tDelhi", 3, 2)

        assert rows == [["Aarav", "25", "Mumbai"], ["Priya", "30", "Delhi"]]

    def test_comma_separated_is_trimmed(self):
        rows = parse_pasted_rows("Aarav, 25 ,Mumbai", 3, 1)

        assert rows == [["Aarav", "25", "Mumbai"]]

    def test_wide_space_separated(self):
        rows = parse_pasted_rows("Rahul Kumar   41   Pune", 3, 1)

        assert rows == [["Rahul Kumar", "41", "Pune"]]

    def test_blank_lines_skipped_and_shape_fitted(self):
        rows = parse_pasted_rows("a,b,c,d\n\n   \ne\r\n", 3, 3)

        assert rows == [["a", "b", "c"], ["e", "", ""], ["", "", ""]]

    def test_extra_lines_truncated(self):
        rows = parse_pasted_rows("1\n2\n3\n4", 1, 2)

        assert rows == [["1"], ["2"]]

    def test_blank_text(self):
        assert parse_pasted_rows("  \n ", 2, 2) == []


def test_fit_rows():
    assert fit_rows([[1, 2, 3]], 2, 2) == [[1, 2], ["", ""]]
