"""Decode uploaded CSV bytes into rows and encode rows back into CSV text."""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from csvreview.errors import InvalidInput

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPES = frozenset({
    "text/csv",
    "application/csv",
    "text/x-csv",
    "application/vnd.ms-excel",
})


@dataclass
class ParsedCSV:
    """Header list plus one mapping per data record, in file order"""
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)


def is_csv_upload(filename: Optional[str], content_type: Optional[str]) -> bool:
    """
    Check whether an upload looks like a CSV file.

    Either a ``.csv`` extension or a CSV content type is enough.
    """
    if filename and filename.lower().endswith(".csv"):
        return True
    if content_type:
        media_type = content_type.split(";", 1)[0].strip().lower()
        return media_type in CSV_CONTENT_TYPES
    return False


def _ensure_field_size_limit(size: int) -> None:
    if csv.field_size_limit() < size:
        csv.field_size_limit(size)


def decode_csv(contents: bytes) -> ParsedCSV:
    """
    Parse raw CSV bytes.

    The first non-blank record is the header list. Every later record maps
    header names to field values. Short records only carry the keys they
    have, and fields past the last header are dropped. When header names
    repeat, the last matching field wins.

    Args:
        contents: Raw uploaded bytes, UTF-8 with an optional BOM

    Returns:
        ParsedCSV with headers and rows

    Raises:
        InvalidInput: If the bytes are not UTF-8 or there is no header record
    """
    try:
        text = contents.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise InvalidInput("CSV file must be UTF-8 encoded")

    # No single field can be longer than the whole file
    _ensure_field_size_limit(len(text) + 1)
    reader = csv.reader(io.StringIO(text, newline=""))

    headers: Optional[List[str]] = None
    rows: List[Dict[str, str]] = []
    skipped = 0
    while True:
        try:
            fields = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            if headers is None:
                raise InvalidInput(f"Error reading CSV header: {e}")
            # Best effort: drop the unreadable record and keep going
            skipped += 1
            logger.warning("Skipping malformed CSV record near line %d: %s", reader.line_num, e)
            continue

        if not fields:
            continue
        if headers is None:
            headers = fields
            continue
        rows.append(dict(zip(headers, fields)))

    if not headers:
        raise InvalidInput("CSV file is empty or invalid")

    if skipped:
        logger.info("Decoded %d CSV rows, skipped %d malformed records", len(rows), skipped)
    return ParsedCSV(headers=headers, rows=rows)


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def encode_csv(headers: Sequence[str], rows: Iterable[Mapping[str, Any]]) -> str:
    """
    Serialize rows as CSV text in ``headers`` order.

    Every field is quoted and embedded quotes are doubled. Missing keys
    become empty fields and keys outside ``headers`` are dropped.
    """
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_cell(row.get(header)) for header in headers])
    return output.getvalue()
