"""Persistence and lookup of uploaded CSV files and their rows."""
import json
import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy import func, insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from csvreview.config import ROW_INSERT_BATCH_SIZE
from csvreview.errors import StorageFailure
from csvreview.models.csv_data import CSVFile, CSVRow, generate_id
from csvreview.services.csv_codec import ParsedCSV
from csvreview.utils import chunked, get_or_404, parse_json_safe

logger = logging.getLogger(__name__)


def ingest_csv(db: Session, filename: str, parsed: ParsedCSV) -> Tuple[CSVFile, int]:
    """
    Store a decoded CSV file and all of its rows.

    The file record is flushed before any row is inserted, and everything
    is committed together.

    Returns:
        Tuple of (file record, number of rows stored)

    Raises:
        StorageFailure: If any write fails
    """
    csv_file = CSVFile(
        id=generate_id(),
        filename=filename,
        headers=json.dumps(parsed.headers),
    )
    row_docs = [
        {
            "id": generate_id(),
            "csv_file_id": csv_file.id,
            "row_index": index,
            "row_data": json.dumps(row_data),
            "is_reviewed": False,
            "review_timestamp": None,
        }
        for index, row_data in enumerate(parsed.rows)
    ]

    try:
        db.add(csv_file)
        db.flush()

        for batch in chunked(row_docs, ROW_INSERT_BATCH_SIZE):
            db.execute(insert(CSVRow), list(batch))

        db.commit()
        db.refresh(csv_file)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageFailure(f"Error storing CSV data for {filename}") from e

    logger.info("Stored CSV file %s (%s) with %d rows", csv_file.id, filename, len(row_docs))
    return csv_file, len(row_docs)


def get_csv_file(db: Session, csv_id: str) -> CSVFile:
    return get_or_404(db, CSVFile, csv_id, "CSV file not found")


def count_rows(db: Session, csv_ids: Optional[List[str]] = None) -> Dict[str, int]:
    """Row counts keyed by file id. Files without rows are absent from the result."""
    query = db.query(CSVRow.csv_file_id, func.count(CSVRow.id)).group_by(CSVRow.csv_file_id)
    if csv_ids is not None:
        query = query.filter(CSVRow.csv_file_id.in_(csv_ids))
    return {csv_id: count for csv_id, count in query.all()}


def list_csv_files(db: Session) -> List[Tuple[CSVFile, int]]:
    """All uploaded files, oldest first, with their row counts"""
    csv_files = db.query(CSVFile).order_by(CSVFile.upload_timestamp, CSVFile.id).all()
    counts = count_rows(db)
    return [(csv_file, counts.get(csv_file.id, 0)) for csv_file in csv_files]


def query_rows(db: Session, csv_id: str, reviewed: Optional[bool] = None) -> List[CSVRow]:
    """Rows of a file in upload order, optionally restricted by review status"""
    query = db.query(CSVRow).filter(CSVRow.csv_file_id == csv_id)
    if reviewed is not None:
        query = query.filter(CSVRow.is_reviewed == reviewed)
    return query.order_by(CSVRow.row_index).all()


def iter_row_data(db: Session, csv_id: str, batch_size: int = 1000) -> Iterator[Dict[str, Any]]:
    """Stream decoded row mappings of a file without loading ORM objects"""
    result = (
        db.query(CSVRow.row_data)
        .filter(CSVRow.csv_file_id == csv_id)
        .order_by(CSVRow.row_index)
        .yield_per(batch_size)
    )
    for (row_data,) in result:
        yield parse_json_safe(row_data, {})
