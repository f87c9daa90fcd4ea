"""Tests for CSV decoding, encoding and upload acceptance."""

from __future__ import annotations

import csv
import io

import pytest

from csvreview.errors import InvalidInput
from csvreview.services.csv_codec import decode_csv, encode_csv, is_csv_upload


class TestDecodeCsv:
    def test_headers_and_rows_in_order(self):
        parsed = decode_csv(b"name,age\nAlice,30\nBob,\nCarol,25\n")

        assert parsed.headers == ["name", "age"]
        assert parsed.rows == [
            {"name": "Alice", "age": "30"},
            {"name": "Bob", "age": ""},
            {"name": "Carol", "age": "25"},
        ]

    def test_short_record_does_not_synthesize_keys(self):
        parsed = decode_csv(b"a,b,c\n1,2\n")

        assert parsed.rows == [{"a": "1", "b": "2"}]

    def test_extra_fields_are_dropped(self):
        parsed = decode_csv(b"a,b\n1,2,3,4\n")

        assert parsed.rows == [{"a": "1", "b": "2"}]

    def test_quoted_fields(self):
        parsed = decode_csv(b'title,note\n"Hello, world","He said ""hi""\nthen left"\n')

        assert parsed.rows == [{"title": "Hello, world", "note": 'He said "hi"\nthen left'}]

    def test_bom_and_crlf(self):
        parsed = decode_csv("\ufeffid,city\r\n1,Paris\r\n2,Oslo\r\n".encode("utf-8"))

        assert parsed.headers == ["id", "city"]
        assert [row["city"] for row in parsed.rows] == ["Paris", "Oslo"]

    def test_blank_lines_are_skipped(self):
        parsed = decode_csv(b"\n\nx,y\n\n1,2\n\n")

        assert parsed.headers == ["x", "y"]
        assert parsed.rows == [{"x": "1", "y": "2"}]

    def test_duplicate_headers_keep_last_value(self):
        parsed = decode_csv(b"k,k\nfirst,second\n")

        assert parsed.headers == ["k", "k"]
        assert parsed.rows == [{"k": "second"}]

    def test_header_only_file_has_no_rows(self):
        parsed = decode_csv(b"a,b\n")

        assert parsed.headers == ["a", "b"]
        assert parsed.rows == []

    def test_empty_input_is_rejected(self):
        with pytest.raises(InvalidInput):
            decode_csv(b"\n\n")

    def test_non_utf8_is_rejected(self):
        with pytest.raises(InvalidInput, match="UTF-8"):
            decode_csv("name\nJos\xe9\n".encode("latin-1"))

    def test_field_longer_than_default_csv_limit_is_kept(self):
        huge = "x" * 200_000
        contents = f"a,b\n1,{huge}\n2,small\n".encode("utf-8")

        parsed = decode_csv(contents)

        assert parsed.rows == [{"a": "1", "b": huge}, {"a": "2", "b": "small"}]

    def test_quoted_long_field_with_newlines_is_kept(self):
        long_text = ("line " * 40_000).strip().replace(" ", "\n")
        contents = f'id,body\n7,"{long_text}"\n'.encode("utf-8")

        parsed = decode_csv(contents)

        assert parsed.rows == [{"id": "7", "body": long_text}]


class TestEncodeCsv:
    def test_all_fields_quoted(self):
        text = encode_csv(["name", "age"], [{"name": "Alice", "age": "30"}])

        assert text == '"name","age"\n"Alice","30"\n'

    def test_missing_keys_render_empty_and_extra_keys_are_dropped(self):
        text = encode_csv(["a", "b"], [{"a": "1", "extra": "zzz"}, {"b": None}])

        assert text == '"a","b"\n"1",""\n"",""\n'

    def test_embedded_quotes_are_doubled(self):
        text = encode_csv(["q"], [{"q": 'say "hi"'}])

        assert text.splitlines()[1] == '"say ""hi"""'

    def test_round_trip_with_special_characters(self):
        headers = ["plain", "comma", "quote", "newline"]
        rows = [
            {"plain": "abc", "comma": "a,b", "quote": '"q"', "newline": "line1\nline2"},
            {"plain": "", "comma": ",", "quote": '""', "newline": "\r\n"},
        ]

        parsed = decode_csv(encode_csv(headers, rows).encode("utf-8"))

        assert parsed.headers == headers
        assert parsed.rows == rows

    def test_output_is_readable_by_csv_module(self):
        text = encode_csv(["a"], [{"a": 1}, {"a": 2.5}])

        assert list(csv.reader(io.StringIO(text))) == [["a"], ["1"], ["2.5"]]


@pytest.mark.parametrize(
    "filename,content_type,expected",
    [
        ("data.csv", "text/csv", True),
        ("DATA.CSV", None, True),
        ("data.csv", "application/octet-stream", True),
        ("export", "text/csv; charset=utf-8", True),
        ("export", "application/vnd.ms-excel", True),
        ("notes.txt", "text/plain", False),
        ("image.png", "image/png", False),
        (None, None, False),
    ],
)
def test_is_csv_upload(filename, content_type, expected):
    assert is_csv_upload(filename, content_type) is expected
