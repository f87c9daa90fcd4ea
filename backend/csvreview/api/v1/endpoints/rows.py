from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from csvreview.database import get_db
from csvreview.schemas.csv_data import ReviewStatusRequest, ReviewStatusResponse
from csvreview.services.review_service import update_review_status

router = APIRouter()


@router.post("/review-status", response_model=ReviewStatusResponse)
def set_review_status(
    request: ReviewStatusRequest,
    db: Session = Depends(get_db)
) -> ReviewStatusResponse:
    """Mark rows as reviewed or unreviewed"""
    updated = update_review_status(db, request.row_ids, request.is_reviewed)
    return ReviewStatusResponse(
        message=f"Updated {updated} rows",
        updated_count=updated
    )
