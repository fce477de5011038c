# cellplan/backend/main.py
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Literal, Optional
from pathlib import Path
import logging

from ..analysis.coverage import (
    DEFAULT_GRID_SIZE,
    DEFAULT_THRESHOLD,
    DEFAULT_TOWER_COUNT,
    LOCAL_GRID_SIZE,
    coverage_grid,
    coverage_stats,
    find_coverage_gaps,
    local_coverage_stats,
    location_points,
    network_points,
    recommend_towers,
    signal_distribution,
    weak_areas,
)
from ..config import configure_logging, load_settings
from . import data_io
from .data_io import DataFileNotFound
from .wifi import get_wifi_info

settings = load_settings()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cellular Network Planning API",
    description="Serves signal measurement files as JSON and suggests tower placements"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Models ----------

class PlanRequest(BaseModel):
    tower_count: int = Field(DEFAULT_TOWER_COUNT, ge=1, le=20)
    coverage_threshold: float = Field(DEFAULT_THRESHOLD, ge=-120, le=-60)
    algorithm: Literal["coverage", "density", "kmeans"] = "coverage"
    grid_size: float = Field(DEFAULT_GRID_SIZE, gt=0)
    user: Optional[str] = None

class PlanResponse(BaseModel):
    gaps: List[Dict[str, Any]]
    towers: List[Dict[str, Any]]
    stats: Dict[str, Any]

class LocalPlanRequest(BaseModel):
    grid_size: float = Field(LOCAL_GRID_SIZE, gt=0)
    user: Optional[str] = None

class LocalPlanResponse(BaseModel):
    grid: List[Dict[str, Any]]
    stats: Dict[str, Any]
    distribution: List[Dict[str, Any]]
    weak_areas: List[Dict[str, Any]]
    points: List[Dict[str, Any]]

# ---------- Errors ----------

class ApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.details = details

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    body = {"error": exc.message}
    if exc.details is not None:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)

# ---------- Dependencies ----------

def get_data_dir() -> Path:
    return settings.data_dir

def get_row_limit() -> int:
    return settings.row_limit

def _signal_records(data_dir: Path, user: Optional[str], limit: int) -> List[Dict[str, Any]]:
    try:
        return data_io.load_signal_records(data_dir, user, limit)
    except (DataFileNotFound, ValueError) as e:
        logger.error("Error loading data: %s", e)
        raise ApiError(404, "Data not found", str(e))

@app.on_event("startup")
async def startup_event():
    configure_logging(settings.log_level)
    if not settings.data_dir.is_dir():
        logger.warning("Data directory %s does not exist", settings.data_dir)
    logger.info("Serving data from %s", settings.data_dir)

# ---------- Endpoints ----------

@app.get("/")
async def root():
    return {"message": "Cellular Network Planning API"}

@app.get("/health")
async def health_check(data_dir: Path = Depends(get_data_dir)):
    return {
        "status": "healthy",
        "data_dir": str(data_dir),
        "data_dir_exists": data_dir.is_dir(),
    }

@app.get("/api/summary")
def get_summary(data_dir: Path = Depends(get_data_dir)):
    try:
        return data_io.read_json(data_dir / data_io.SUMMARY_FILE)
    except (DataFileNotFound, ValueError):
        raise ApiError(404, "Summary statistics not found")

@app.get("/api/towers")
def get_towers(data_dir: Path = Depends(get_data_dir)):
    try:
        return data_io.read_csv_records(data_dir / data_io.TOWERS_FILE)
    except (DataFileNotFound, ValueError):
        raise ApiError(404, "Tower recommendations not found")

@app.get("/api/coverage")
def get_coverage(data_dir: Path = Depends(get_data_dir)):
    try:
        return data_io.read_csv_records(data_dir / data_io.COVERAGE_FILE)
    except (DataFileNotFound, ValueError):
        raise ApiError(404, "Coverage summary not found")

@app.get("/api/data")
def get_all_data(
    data_dir: Path = Depends(get_data_dir),
    limit: int = Depends(get_row_limit),
):
    return _signal_records(data_dir, None, limit)

@app.get("/api/data/{user}")
def get_user_data(
    user: str,
    data_dir: Path = Depends(get_data_dir),
    limit: int = Depends(get_row_limit),
):
    return _signal_records(data_dir, user, limit)

@app.get("/api/user/{user}/summary")
def get_user_summary(user: str, data_dir: Path = Depends(get_data_dir)):
    try:
        return data_io.load_user_summary(data_dir, user)
    except (DataFileNotFound, ValueError):
        raise ApiError(404, "User summary not found")

@app.get("/api/wifi")
async def get_wifi():
    try:
        return get_wifi_info(probe=settings.wifi_probe)
    except Exception as e:
        logger.exception("WiFi info error: %s", e)
        raise ApiError(500, "Unable to fetch WiFi information")

@app.post("/api/plan", response_model=PlanResponse)
def plan_towers(
    req: PlanRequest,
    data_dir: Path = Depends(get_data_dir),
    limit: int = Depends(get_row_limit),
):
    records = _signal_records(data_dir, req.user, limit)
    try:
        gaps = find_coverage_gaps(location_points(records), req.coverage_threshold, req.grid_size)
        towers = recommend_towers(gaps, req.tower_count, req.algorithm)
    except ValueError as e:
        raise ApiError(400, str(e))

    logger.info(
        "Planned %d towers over %d gaps (algorithm=%s, threshold=%.1f)",
        len(towers), len(gaps), req.algorithm, req.coverage_threshold,
    )
    return PlanResponse(
        gaps=[g.to_dict() for g in gaps],
        towers=[t.to_dict() for t in towers],
        stats=coverage_stats(records, towers, req.coverage_threshold),
    )

@app.post("/api/local_plan", response_model=LocalPlanResponse)
def local_plan(
    req: LocalPlanRequest,
    data_dir: Path = Depends(get_data_dir),
    limit: int = Depends(get_row_limit),
):
    records = _signal_records(data_dir, req.user, limit)
    points = network_points(records)
    grid = coverage_grid(points, req.grid_size)
    return LocalPlanResponse(
        grid=[cell.to_dict() for cell in grid],
        stats=local_coverage_stats(points),
        distribution=signal_distribution(points),
        weak_areas=weak_areas(grid),
        points=[{"x": p.x, "y": p.y, "rssi": p.rssi} for p in points],
    )

if __name__ == "__main__":
    import uvicorn
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)
