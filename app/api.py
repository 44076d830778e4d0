"""HTTP route definitions for the service."""

from __future__ import annotations

import io
import math
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from app.schemas import MatchEntry, MatchResponse, ReadingSchema
from services.exiftool import parse_capture_timestamp
from services.log_parser import parse_log, read_rows
from services.matcher import find_match
from settings import Settings, get_settings

router = APIRouter()


def _parse_target(raw: str) -> Optional[datetime]:
    try:
        return parse_capture_timestamp(raw)
    except ValueError:
        return None


@router.post(
    "/match",
    response_model=MatchResponse,
    summary="Match capture times against an uploaded weather log.",
)
async def match_timestamps(
    file: UploadFile = File(..., description="Weather history CSV."),
    timestamps: List[str] = Form(..., description="Capture times as YYYY:MM:DD HH:MM:SS."),
    threshold_minutes: Optional[float] = Query(None, ge=0),
    settings: Settings = Depends(get_settings),
) -> MatchResponse:
    contents = await file.read()
    await file.close()
    if not contents:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded log is empty.",
        )
    text = contents.decode("utf-8-sig", errors="replace")
    series = parse_log(read_rows(io.StringIO(text, newline="")))
    threshold = threshold_minutes if threshold_minutes is not None else settings.threshold_minutes

    results: List[MatchEntry] = []
    for raw in timestamps:
        result = find_match(_parse_target(raw), series, threshold)
        reading = result.nearest_reading
        results.append(
            MatchEntry(
                timestamp=raw,
                status=result.status,
                delta_minutes=None if math.isinf(result.delta_minutes) else result.delta_minutes,
                reading=ReadingSchema.model_validate(reading) if reading is not None else None,
            )
        )

    return MatchResponse(reading_count=len(series), threshold_minutes=threshold, results=results)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
