"""Export of reviewed rows back to CSV."""
import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from csvreview.errors import NothingToExport
from csvreview.services.csv_codec import encode_csv
from csvreview.services.csv_store import get_csv_file, query_rows

logger = logging.getLogger(__name__)


@dataclass
class CSVExport:
    filename: str
    content: str
    row_count: int


def export_reviewed_rows(db: Session, csv_id: str) -> CSVExport:
    """
    Build a CSV containing only the reviewed rows of a file.

    Columns follow the header order of the original upload and rows keep
    their upload order.

    Raises:
        NotFound: If the file does not exist
        NothingToExport: If the file has no reviewed rows
    """
    csv_file = get_csv_file(db, csv_id)
    rows = query_rows(db, csv_id, reviewed=True)
    if not rows:
        raise NothingToExport()

    content = encode_csv(csv_file.header_list, (row.data for row in rows))
    logger.info("Exported %d reviewed rows of CSV file %s", len(rows), csv_id)
    return CSVExport(
        filename=f"reviewed_{csv_file.filename}",
        content=content,
        row_count=len(rows),
    )
