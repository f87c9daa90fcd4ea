# API v1
from fastapi import APIRouter
from csvreview.api.v1.endpoints import csv, rows, health

api_router = APIRouter()
api_router.include_router(csv.router, prefix="", tags=["csv"])
api_router.include_router(rows.router, prefix="/rows", tags=["rows"])
api_router.include_router(health.router, prefix="", tags=["health"])
