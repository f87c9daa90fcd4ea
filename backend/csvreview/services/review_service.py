"""Service for marking rows as reviewed or unreviewed."""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from csvreview.config import REVIEW_UPDATE_CHUNK_SIZE
from csvreview.errors import StorageFailure
from csvreview.models.csv_data import CSVRow
from csvreview.utils import chunked

logger = logging.getLogger(__name__)


def update_review_status(
    db: Session,
    row_ids: Iterable[str],
    is_reviewed: bool,
    now: Optional[datetime] = None
) -> int:
    """
    Set the review flag on a set of rows.

    Only rows not already in the target state are written: marking stamps
    them with the current time and unmarking clears the timestamp, so
    repeating a call changes nothing. Unknown ids are ignored.

    Args:
        db: Database session
        row_ids: Ids of the rows to update
        is_reviewed: Target review state
        now: Review time to record (defaults to the current time)

    Returns:
        Number of rows whose review state changed

    Raises:
        StorageFailure: If the update fails
    """
    unique_ids = list(dict.fromkeys(row_ids))
    if not unique_ids:
        return 0

    if is_reviewed:
        stamp = now or datetime.now()
        values = {CSVRow.is_reviewed: True, CSVRow.review_timestamp: stamp}
    else:
        values = {CSVRow.is_reviewed: False, CSVRow.review_timestamp: None}

    updated = 0
    try:
        for chunk in chunked(unique_ids, REVIEW_UPDATE_CHUNK_SIZE):
            updated += db.query(CSVRow).filter(
                CSVRow.id.in_(chunk), CSVRow.is_reviewed != is_reviewed
            ).update(values, synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageFailure("Error updating review status") from e

    logger.info("Set is_reviewed=%s on %d of %d requested rows", is_reviewed, updated, len(unique_ids))
    return updated
