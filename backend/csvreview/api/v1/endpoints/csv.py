from fastapi import APIRouter, UploadFile, File, Depends, Query, Request
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
import io
import logging
from typing import Dict, List, Optional
from urllib.parse import quote

from csvreview.config import MAX_UPLOAD_BYTES
from csvreview.database import get_db
from csvreview.errors import InvalidFilterSyntax, InvalidInput
from csvreview.models.csv_data import CSVFile, CSVRow
from csvreview.schemas.csv_data import CSVFileResponse, CSVRowResponse, CSVRowsResponse, CSVUploadResponse
from csvreview.services.column_facets import build_column_facets
from csvreview.services.csv_codec import decode_csv, is_csv_upload
from csvreview.services.csv_store import count_rows, get_csv_file, ingest_csv, iter_row_data, list_csv_files, query_rows
from csvreview.services.export_service import export_reviewed_rows
from csvreview.services.row_filter import RowFilter, filter_rows, parse_column_filters, parse_reviewed_only

logger = logging.getLogger(__name__)

router = APIRouter()


def _file_response(csv_file: CSVFile, row_count: int) -> CSVFileResponse:
    return CSVFileResponse(
        id=csv_file.id,
        filename=csv_file.filename,
        headers=csv_file.header_list,
        upload_timestamp=csv_file.upload_timestamp,
        row_count=row_count
    )


def _row_response(row: CSVRow) -> CSVRowResponse:
    return CSVRowResponse(
        id=row.id,
        csv_id=row.csv_file_id,
        row_index=row.row_index,
        row_data=row.data,
        is_reviewed=row.is_reviewed,
        review_timestamp=row.review_timestamp
    )


def _content_disposition(filename: str) -> str:
    """Attachment header value, with an RFC 5987 fallback for non-ASCII names"""
    filename = filename.replace("\r", "").replace("\n", "")
    if filename.isascii():
        return f"attachment; filename={filename}"
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
    return f"attachment; filename={ascii_name}; filename*=UTF-8''{quote(filename)}"


@router.post("/upload", response_model=CSVUploadResponse)
async def upload_csv(
    request: Request,
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
) -> CSVUploadResponse:
    """Upload a CSV file and store each data row"""
    if not is_csv_upload(file.filename, file.content_type):
        raise InvalidInput("File must be a CSV")

    contents = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(contents) > MAX_UPLOAD_BYTES:
        raise InvalidInput(f"CSV file exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit")
    if not contents:
        raise InvalidInput("CSV file is empty")

    # Parsing and storing are blocking, keep them off the event loop
    parsed = await run_in_threadpool(decode_csv, contents)

    # Nothing has been written yet, so a vanished client costs nothing
    if await request.is_disconnected():
        logger.warning("Client disconnected during upload of %s; not storing", file.filename)
        raise InvalidInput("Upload aborted by client")

    filename = file.filename or "upload.csv"
    csv_file, row_count = await run_in_threadpool(ingest_csv, db, filename, parsed)

    return CSVUploadResponse(
        csv_id=csv_file.id,
        filename=csv_file.filename,
        headers=parsed.headers,
        row_count=row_count
    )


@router.get("/files", response_model=List[CSVFileResponse])
def list_files(db: Session = Depends(get_db)) -> List[CSVFileResponse]:
    """List all uploaded CSV files"""
    return [_file_response(csv_file, row_count) for csv_file, row_count in list_csv_files(db)]


@router.get("/files/{csv_id}", response_model=CSVFileResponse)
def get_file(csv_id: str, db: Session = Depends(get_db)) -> CSVFileResponse:
    """Get metadata of one uploaded CSV file"""
    csv_file = get_csv_file(db, csv_id)
    return _file_response(csv_file, count_rows(db, [csv_id]).get(csv_id, 0))


@router.get("/files/{csv_id}/rows", response_model=CSVRowsResponse)
def get_rows(
    csv_id: str,
    reviewed_only: Optional[str] = Query(None, alias="reviewedOnly"),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    column_filters: Optional[str] = Query(None, alias="columnFilters"),
    db: Session = Depends(get_db)
) -> CSVRowsResponse:
    """Get the rows of a CSV file matching the given filters"""
    csv_file = get_csv_file(db, csv_id)
    review_axis = parse_reviewed_only(reviewed_only)

    try:
        parsed_filters = parse_column_filters(column_filters)
    except InvalidFilterSyntax as e:
        # Malformed column filters are ignored rather than rejected
        logger.warning("Ignoring column filters for CSV file %s: %s", csv_id, e.detail)
        parsed_filters = None

    row_filter = RowFilter(
        reviewed_only=review_axis,
        search_term=search_term,
        column_filters=parsed_filters
    )
    rows = filter_rows(query_rows(db, csv_id, reviewed=review_axis), row_filter)

    return CSVRowsResponse(
        file=_file_response(csv_file, count_rows(db, [csv_id]).get(csv_id, 0)),
        rows=[_row_response(row) for row in rows]
    )


@router.get("/files/{csv_id}/columns", response_model=Dict[str, List[str]])
def get_column_values(csv_id: str, db: Session = Depends(get_db)) -> Dict[str, List[str]]:
    """Get the sorted distinct values of every column, for building filters"""
    csv_file = get_csv_file(db, csv_id)
    return build_column_facets(csv_file.header_list, iter_row_data(db, csv_id))


@router.get("/files/{csv_id}/export-reviewed")
def export_reviewed(csv_id: str, db: Session = Depends(get_db)) -> StreamingResponse:
    """Download the reviewed rows of a CSV file as CSV"""
    export = export_reviewed_rows(db, csv_id)

    return StreamingResponse(
        io.BytesIO(export.content.encode("utf-8")),
        media_type="text/csv",
        headers={"Content-Disposition": _content_disposition(export.filename)}
    )
