"""Configuration settings"""
import os
from typing import List

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./csvreview.db")

# Application settings
API_PREFIX = os.getenv("API_PREFIX", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Upload limits
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024)))  # 100MB
ROW_INSERT_BATCH_SIZE = int(os.getenv("ROW_INSERT_BATCH_SIZE", "1000"))
REVIEW_UPDATE_CHUNK_SIZE = int(os.getenv("REVIEW_UPDATE_CHUNK_SIZE", "500"))

# CORS configuration
CORS_ORIGINS: List[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# Allow additional origins from environment variable (comma-separated)
_extra_origins = os.getenv("CORS_ORIGINS", "")
if _extra_origins:
    CORS_ORIGINS.extend([origin.strip() for origin in _extra_origins.split(",") if origin.strip()])
