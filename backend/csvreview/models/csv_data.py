"""CSV data models"""
import uuid
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text

from csvreview.database import Base
from csvreview.utils import parse_json_safe


def generate_id() -> str:
    return str(uuid.uuid4())


class CSVFile(Base):
    """Model for storing uploaded CSV file metadata"""
    __tablename__ = "csv_files"

    id = Column(String(36), primary_key=True, default=generate_id)
    filename = Column(String, nullable=False)
    upload_timestamp = Column(DateTime, default=datetime.now, nullable=False)
    headers = Column(Text, nullable=False)  # JSON string of column names, in upload order

    @property
    def header_list(self) -> List[str]:
        return parse_json_safe(self.headers, [])


class CSVRow(Base):
    """Model for storing individual CSV rows and their review state"""
    __tablename__ = "csv_rows"

    id = Column(String(36), primary_key=True, default=generate_id)
    csv_file_id = Column(String(36), ForeignKey("csv_files.id"), nullable=False)
    row_index = Column(Integer, nullable=False)  # Position of the record in the uploaded file
    row_data = Column(Text, nullable=False)  # JSON string of column name -> raw value
    is_reviewed = Column(Boolean, default=False, nullable=False)
    review_timestamp = Column(DateTime, nullable=True)  # Set iff is_reviewed

    __table_args__ = (
        Index("ix_csv_rows_file_index", "csv_file_id", "row_index"),
        Index("ix_csv_rows_file_reviewed", "csv_file_id", "is_reviewed"),
    )

    @property
    def data(self) -> Dict[str, Any]:
        return parse_json_safe(self.row_data, {})
