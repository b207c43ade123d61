"""Unit tests for app.services.spreadsheet."""

import pytest

from app.core.errors import EmptyInputError, SpreadsheetDecodeError
from app.services.spreadsheet import read_spreadsheet


# ---------------------------------------------------------------------------
# xlsx
# ---------------------------------------------------------------------------

class TestReadXlsx:
    def test_rows_keyed_by_header(self, make_xlsx, make_movie):
        content = make_xlsx([make_movie("Alpha"), make_movie("Beta", year=1999)])
        rows = read_spreadsheet(content, "movies.xlsx")
        assert [r["movie_name"] for r in rows] == ["Alpha", "Beta"]
        assert rows[1]["release_year"] == 1999

    def test_empty_cells_are_omitted(self, make_xlsx, make_movie):
        rows = read_spreadsheet(make_xlsx([make_movie("Alpha")]))
        assert "side_actor" not in rows[0]
        assert "side_actress" not in rows[0]

    def test_only_first_sheet_is_read(self, make_xlsx, make_movie):
        content = make_xlsx(
            [make_movie("Alpha")],
            extra_sheets={"Other": [["movie_name"], ["Hidden"]]},
        )
        rows = read_spreadsheet(content)
        assert [r["movie_name"] for r in rows] == ["Alpha"]

    def test_headers_are_not_normalized(self, make_xlsx):
        content = make_xlsx([{"Movie_Name ": "Alpha"}], headers=["Movie_Name "])
        rows = read_spreadsheet(content)
        assert rows == [{"Movie_Name ": "Alpha"}]

    def test_header_only_sheet_is_empty(self, make_xlsx):
        with pytest.raises(EmptyInputError):
            read_spreadsheet(make_xlsx([]))

    def test_blank_rows_skipped(self, make_xlsx, make_movie):
        content = make_xlsx([make_movie("Alpha"), {}, make_movie("Beta")])
        rows = read_spreadsheet(content)
        assert len(rows) == 2

    def test_corrupt_workbook(self):
        with pytest.raises(SpreadsheetDecodeError):
            read_spreadsheet(b"PK\x03\x04 definitely not a workbook", "broken.xlsx")


# ---------------------------------------------------------------------------
# csv
# ---------------------------------------------------------------------------

class TestReadCsv:
    def test_csv_rows(self):
        content = "movie_name,release_year,side_actor\nAlpha,2001,\nBeta,1999,Bob\n".encode()
        rows = read_spreadsheet(content, "movies.csv")
        assert rows == [
            {"movie_name": "Alpha", "release_year": "2001"},
            {"movie_name": "Beta", "release_year": "1999", "side_actor": "Bob"},
        ]

    def test_csv_with_bom_detected_without_filename(self):
        content = "\ufeffmovie_name\nAlpha\n".encode("utf-8")
        assert read_spreadsheet(content) == [{"movie_name": "Alpha"}]

    def test_empty_csv(self):
        with pytest.raises(EmptyInputError):
            read_spreadsheet(b"", "movies.csv")

    def test_non_utf8_payload(self):
        with pytest.raises(SpreadsheetDecodeError):
            read_spreadsheet(b"\xff\xfe\x00garbage\x81", "movies.csv")
