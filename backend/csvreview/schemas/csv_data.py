from pydantic import BaseModel, StrictBool
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Dict, Any, Optional


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class CSVFileResponse(CamelModel):
    id: str
    filename: str
    headers: List[str]
    upload_timestamp: datetime
    row_count: int


class CSVUploadResponse(CamelModel):
    message: str = "CSV uploaded successfully"
    csv_id: str
    filename: str
    headers: List[str]
    row_count: int


class CSVRowResponse(CamelModel):
    id: str
    csv_id: str
    row_index: int
    row_data: Dict[str, Any]
    is_reviewed: bool
    review_timestamp: Optional[datetime] = None


class CSVRowsResponse(CamelModel):
    file: CSVFileResponse
    rows: List[CSVRowResponse]


class ReviewStatusRequest(CamelModel):
    row_ids: List[str]
    is_reviewed: StrictBool


class ReviewStatusResponse(CamelModel):
    message: str
    updated_count: int


class HealthResponse(CamelModel):
    status: str
    db_connected: bool
    uptime_seconds: float


class ReadinessResponse(CamelModel):
    ready: bool
