from __future__ import annotations

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from kartline.geometry import as_points, track_length
from kartline.pipeline import format_lap_time, generate_racing_line
from kartline.raceline import calculate_lap_time, validate_racing_line
from kartline.track import DEFAULT_TRACK_WIDTH, TrackData
from kartline.vehicle import PhysicsConfig

from .config import DEFAULT_ITERATIONS, MAX_ITERATIONS, MAX_POINTS

logger = logging.getLogger("kartline-server")

router = APIRouter(prefix="/api/racing-line", tags=["racing-line"])


class XYPoint(BaseModel):
    x: float
    y: float


class PhysicsOverrides(BaseModel):
    grip: Optional[float] = Field(None, gt=0, description="Clamped to 0.6..1.5")
    max_acceleration: Optional[float] = Field(None, gt=0)
    max_braking: Optional[float] = Field(None, gt=0)
    max_speed_kmh: Optional[float] = Field(None, gt=0)
    weight_kg: Optional[float] = Field(None, gt=0)

    def to_config(self) -> PhysicsConfig:
        return PhysicsConfig().with_updates(**self.model_dump())


class GenerateRequest(BaseModel):
    track_points: List[XYPoint] = Field(..., max_length=MAX_POINTS, description="Drawn centerline")
    iterations: int = Field(DEFAULT_ITERATIONS, ge=1, le=MAX_ITERATIONS)
    seed: Optional[int] = None
    track_width: float = Field(DEFAULT_TRACK_WIDTH, gt=0)
    physics: PhysicsOverrides = Field(default_factory=PhysicsOverrides)
    boundaries: List[List[XYPoint]] = Field(default_factory=list, description="Forbidden polygons")
    limits: Optional[List[XYPoint]] = Field(None, description="Allowed region polygon")


class LapTimeRequest(BaseModel):
    line: List[XYPoint] = Field(..., max_length=MAX_POINTS)
    physics: PhysicsOverrides = Field(default_factory=PhysicsOverrides)


class ValidateRequest(BaseModel):
    line: List[XYPoint] = Field(..., max_length=MAX_POINTS)
    boundaries: List[List[XYPoint]] = Field(default_factory=list)
    limits: Optional[List[XYPoint]] = None


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[str]


class LapTimeResponse(BaseModel):
    lapTime: Optional[float]
    lapTimeText: str
    length: float


class GenerateResponse(BaseModel):
    racingLine: List[XYPoint]
    lapTime: Optional[float]
    lapTimeText: str
    trackLength: float
    minCornerSpeedKmh: Optional[float]
    validation: ValidationResponse
    score: float
    initialScore: float


def _xy(points: List[XYPoint]):
    return [p.model_dump() for p in points]


def _region_track(boundaries: List[List[XYPoint]], limits: Optional[List[XYPoint]]) -> TrackData:
    return TrackData(
        boundaries=[as_points(_xy(b)) for b in boundaries],
        limits=as_points(_xy(limits)) if limits is not None else None,
    )


@router.post("/generate", response_model=GenerateResponse)
def generate(req: GenerateRequest):
    try:
        config = req.physics.to_config()
        result = generate_racing_line(
            _xy(req.track_points),
            config,
            iterations=req.iterations,
            seed=req.seed,
            track_width=req.track_width,
            boundaries=[_xy(b) for b in req.boundaries],
            limits=_xy(req.limits) if req.limits is not None else None,
        )
    except ValueError as e:
        # InsufficientPointsError and bad physics values
        raise HTTPException(status_code=400, detail=str(e))

    logger.info("Generated racing line: %d points, lap %s", len(result.line), format_lap_time(result.lap_time))
    return result.to_dict()


@router.post("/lap-time", response_model=LapTimeResponse)
def lap_time(req: LapTimeRequest):
    if len(req.line) < 2:
        raise HTTPException(status_code=400, detail="Racing line too short")
    try:
        config = req.physics.to_config()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    pts = as_points(_xy(req.line))
    seconds = calculate_lap_time(pts, config=config)
    return {
        "lapTime": seconds if math.isfinite(seconds) else None,
        "lapTimeText": format_lap_time(seconds),
        "length": track_length(pts),
    }


@router.post("/validate", response_model=ValidationResponse)
def validate(req: ValidateRequest):
    track = _region_track(req.boundaries, req.limits)
    return validate_racing_line(_xy(req.line), track).to_dict()
