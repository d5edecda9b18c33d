"""
CAD Floor Plan Analyzer API

- POST /analyze                     raw curves (JSON) → floor plan
- POST /upload                      store a DXF, returns a job id
- POST /process/{job_id}            analyze an uploaded DXF
- POST /process/{job_id}/candidates long orthogonal lines, longest first
"""

import uuid
import os
import json
import logging
from pathlib import Path
from typing import Literal, Optional

from fastapi import FastAPI, File, UploadFile, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from cadplan import __version__
from cadplan.core import config as defaults
from cadplan.core.config import AnalysisConfig, ConfigurationInvalid
from cadplan.core.curves import curves_from_dicts
from cadplan.core.pipeline import ProcessingPipeline, ALL_FORMATS, analyze_floor_plan

logger = logging.getLogger(__name__)

app = FastAPI(
    title="CAD Floor Plan Analyzer API",
    description="Reconstructs walls, doors and windows from double-line CAD floor plans.",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

UPLOAD_DIR = Path("uploads")
MODELS_DIR = Path("models")
UPLOAD_DIR.mkdir(exist_ok=True)
MODELS_DIR.mkdir(exist_ok=True)

jobs: dict[str, dict] = {}
MAX_FILE_SIZE_MB = 50


# ─────────────────────────────────────────────────────────────────────────────
# Request bodies
# ─────────────────────────────────────────────────────────────────────────────

class CurveIn(BaseModel):
    kind: Literal["line", "arc"] = "line"
    startX: float
    startY: float
    endX: float
    endY: float
    length: Optional[float] = None
    centerX: Optional[float] = None
    centerY: Optional[float] = None
    radius: Optional[float] = None
    arcLength: Optional[float] = None
    layer: str = "0"


class AnalyzeRequest(BaseModel):
    curves: list[CurveIn] = Field(default_factory=list)
    config: dict[str, float] = Field(default_factory=dict)


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/health")
def health():
    return {"status": "ok", "version": __version__, "supported_formats": sorted(ALL_FORMATS),
            "default_config": AnalysisConfig().to_dict()}


@app.post("/analyze")
def analyze(body: AnalyzeRequest):
    try:
        config = AnalysisConfig.from_dict(body.config)
        curves = curves_from_dicts(c.model_dump(exclude_none=True) for c in body.curves)
        result = analyze_floor_plan(curves, config)
    except ConfigurationInvalid as e:
        logger.warning("Rejected /analyze request: %s", e)
        raise HTTPException(422, f"Invalid configuration: {e}")
    return {"success": True, **result.to_dict()}


@app.post("/upload")
async def upload_file(file: UploadFile = File(...)):
    suffix = Path(file.filename).suffix.lower()
    if suffix not in ALL_FORMATS:
        raise HTTPException(400, f"Unsupported format '{suffix}'. Supported: {sorted(ALL_FORMATS)}")

    contents = await file.read()
    size_mb = len(contents) / (1024 * 1024)
    if size_mb > MAX_FILE_SIZE_MB:
        raise HTTPException(413, f"File too large ({size_mb:.1f}MB). Max: {MAX_FILE_SIZE_MB}MB")

    job_id = str(uuid.uuid4())
    save_path = UPLOAD_DIR / f"{job_id}{suffix}"
    save_path.write_bytes(contents)

    jobs[job_id] = {
        "status": "uploaded",
        "filename": file.filename,
        "filepath": str(save_path),
        "size_mb": round(size_mb, 3),
        "format": suffix,
        "result": None,
    }

    return {
        "job_id": job_id,
        "filename": file.filename,
        "format": suffix,
        "size_mb": round(size_mb, 3),
        "status": "uploaded",
        "next": f"POST /process/{job_id}",
    }


def _get_job(job_id: str) -> dict:
    if job_id not in jobs:
        raise HTTPException(404, "Job not found")
    return jobs[job_id]


@app.post("/process/{job_id}")
def process_file(
    job_id: str,
    scale: float = Query(default=0.0, description="1 drawing unit = X feet. Use 0 to read $INSUNITS"),
    exterior_wall_thickness: float = Query(default=defaults.EXTERIOR_WALL_THICKNESS,
                                           description="Exterior wall thickness (ft)"),
    interior_wall_thickness: float = Query(default=defaults.INTERIOR_WALL_THICKNESS,
                                           description="Interior wall thickness (ft)"),
    tolerance: float = Query(default=defaults.THICKNESS_TOLERANCE,
                             description="Thickness matching tolerance (ft)"),
    min_wall_length: float = Query(default=defaults.MIN_WALL_LENGTH),
    max_merge_gap: float = Query(default=defaults.MAX_MERGE_GAP,
                                 description="Gaps wider than this end a wall run (ft)"),
    door_width_threshold: float = Query(default=defaults.DOOR_WIDTH_THRESHOLD),
):
    job = _get_job(job_id)
    if job["status"] == "processing":
        raise HTTPException(409, "Already processing")

    jobs[job_id]["status"] = "processing"

    config = AnalysisConfig(
        exterior_wall_thickness=exterior_wall_thickness,
        interior_wall_thickness=interior_wall_thickness,
        tolerance=tolerance,
        min_wall_length=min_wall_length,
        max_merge_gap=max_merge_gap,
        door_width_threshold=door_width_threshold,
    )
    pipeline = ProcessingPipeline(config=config, scale=scale if scale > 0 else None)

    result = pipeline.run(job["filepath"])
    result_dict = result.to_dict()

    if result.success:
        model_path = MODELS_DIR / f"{job_id}.json"
        model_path.write_text(json.dumps(result_dict, indent=2))
        jobs[job_id]["model_path"] = str(model_path)

    if not result.success:
        logger.warning("Job %s failed: %s", job_id, result.error)
    jobs[job_id]["status"] = "done" if result.success else "error"
    jobs[job_id]["result"] = result_dict

    return result_dict


@app.post("/process/{job_id}/candidates")
def wall_candidates(
    job_id: str,
    scale: float = Query(default=0.0, description="1 drawing unit = X feet. Use 0 to read $INSUNITS"),
    min_wall_length: float = Query(default=3.0),
    angle_tolerance: float = Query(default=5.0, description="Degrees from horizontal/vertical"),
):
    job = _get_job(job_id)
    pipeline = ProcessingPipeline(scale=scale if scale > 0 else None)
    try:
        found = pipeline.candidates(job["filepath"], min_wall_length, angle_tolerance)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"success": True, "wallCandidateCount": len(found),
            "wallCandidates": [c.to_dict() for c in found]}


@app.get("/model/{job_id}")
def get_model(job_id: str):
    job = _get_job(job_id)
    if job["status"] == "uploaded":
        raise HTTPException(400, "Not yet processed. Call POST /process/{job_id} first.")
    if job["status"] == "processing":
        return {"status": "processing"}
    return job["result"]


@app.get("/jobs")
def list_jobs():
    return {
        jid: {"status": j["status"], "filename": j.get("filename"), "format": j.get("format")}
        for jid, j in jobs.items()
    }


@app.delete("/job/{job_id}")
def delete_job(job_id: str):
    _get_job(job_id)
    job = jobs.pop(job_id)
    for key in ("filepath", "model_path"):
        p = job.get(key)
        if p and os.path.exists(p):
            os.remove(p)
    return {"deleted": job_id}
