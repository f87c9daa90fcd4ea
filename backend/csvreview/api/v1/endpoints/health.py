"""Liveness and readiness checks"""
import time

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from csvreview.database import Database, get_database
from csvreview.schemas.csv_data import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, database: Database = Depends(get_database)) -> HealthResponse:
    """Always 200 while the process is up; reports whether the database is connected"""
    return HealthResponse(
        status="OK",
        db_connected=database.ready,
        uptime_seconds=round(time.monotonic() - request.app.state.started_at, 3)
    )


@router.get("/ready", response_model=ReadinessResponse, responses={503: {"model": ReadinessResponse}})
def readiness_check(database: Database = Depends(get_database)):
    """200 once the database is connected, 503 until then"""
    if database.ready or database.connect():
        return ReadinessResponse(ready=True)
    return JSONResponse(status_code=503, content=ReadinessResponse(ready=False).model_dump(by_alias=True))
