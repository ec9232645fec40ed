from __future__ import annotations

import datetime as dt
import logging
from typing import Dict, List

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from . import __version__, models
from .config import settings
from .database import engine, get_db
from .errors import ApiError, invalid_id
from .middleware import RequestLogMiddleware, request_id_of
from .report import Report
from .schemas import (
    ErrorResponse,
    PublicHolidayRequest,
    PublicHolidayResponse,
    TimelogRequest,
    TimelogResponse,
    WorkRequest,
    WorkResponse,
)
from .services import (
    build_report,
    delete_public_holiday,
    delete_timelog,
    delete_work,
    get_timelog,
    get_work,
    list_timelogs_in_range,
    public_holidays_by_year,
    save_public_holidays,
    save_timelog,
    save_work,
    unique_years,
)
from .utils import parse_uuid

logger = logging.getLogger(__name__)

models.Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name, version=__version__)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(
        "request %s failed with %s %s: %s",
        request_id_of(request),
        exc.status_code,
        exc.code,
        exc.internal,
    )
    return JSONResponse(exc.payload(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    error = ApiError(status.HTTP_400_BAD_REQUEST, "VALIDATION", "; ".join(messages))
    return await api_error_handler(request, error)


def _parse_id(value: str) -> str:
    parsed = parse_uuid(value)
    if parsed is None:
        raise invalid_id(value)
    return parsed


def _parse_year(value: str) -> int:
    try:
        year = int(value)
    except ValueError as exc:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "RPT-WRONGPARAM",
            "cannot parse year",
            f"cannot parse year {value!r}: {exc}",
        ) from exc
    if not dt.MINYEAR <= year <= dt.MAXYEAR:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            "RPT-WRONGPARAM",
            "cannot parse year",
            f"year {year} is out of range {dt.MINYEAR}..{dt.MAXYEAR}",
        )
    return year


@app.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    return "pong"


@app.put("/timelogs", response_model=TimelogResponse, responses=ERROR_RESPONSES)
def upsert_timelog(payload: TimelogRequest, db: Session = Depends(get_db)) -> TimelogResponse:
    return save_timelog(db, payload)


@app.get("/timelogs/{timelog_id}", response_model=TimelogResponse, responses=ERROR_RESPONSES)
def read_timelog(timelog_id: str, db: Session = Depends(get_db)) -> TimelogResponse:
    return get_timelog(db, _parse_id(timelog_id))


@app.delete("/timelogs/{timelog_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_timelog(timelog_id: str, db: Session = Depends(get_db)) -> Response:
    delete_timelog(db, _parse_id(timelog_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/timelogs/{start}/{stop}", response_model=List[TimelogResponse], responses=ERROR_RESPONSES)
def timelogs_in_range(start: dt.date, stop: dt.date, db: Session = Depends(get_db)) -> List[TimelogResponse]:
    return list_timelogs_in_range(db, start, stop)


@app.get("/publicholidays", response_model=Dict[int, List[PublicHolidayResponse]])
def get_public_holidays(db: Session = Depends(get_db)) -> Dict[int, List[PublicHolidayResponse]]:
    return public_holidays_by_year(db)


@app.put(
    "/publicholidays",
    response_model=Dict[int, List[PublicHolidayResponse]],
    responses=ERROR_RESPONSES,
)
def upsert_public_holidays(
    payload: List[PublicHolidayRequest],
    db: Session = Depends(get_db),
) -> Dict[int, List[PublicHolidayResponse]]:
    return save_public_holidays(db, payload)


@app.delete("/publicholidays/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_public_holiday(holiday_id: str, db: Session = Depends(get_db)) -> Response:
    delete_public_holiday(db, _parse_id(holiday_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.put("/work", response_model=WorkResponse, responses=ERROR_RESPONSES)
def upsert_work(payload: WorkRequest, db: Session = Depends(get_db)) -> WorkResponse:
    return save_work(db, payload)


@app.get("/work/{work_id}", response_model=WorkResponse, responses=ERROR_RESPONSES)
def read_work(work_id: str, db: Session = Depends(get_db)) -> WorkResponse:
    return get_work(db, _parse_id(work_id))


@app.delete("/work/{work_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_work(work_id: str, db: Session = Depends(get_db)) -> Response:
    delete_work(db, _parse_id(work_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/reports/options", response_model=List[int])
def report_options(db: Session = Depends(get_db)) -> List[int]:
    return unique_years(db)


@app.get("/reports/{year}", response_model=Report, responses=ERROR_RESPONSES)
def yearly_report(year: str, db: Session = Depends(get_db)) -> Report:
    return build_report(db, _parse_year(year))
