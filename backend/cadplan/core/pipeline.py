"""Processing Pipeline — CAD lines/arcs → structured floor plan."""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
import logging
import time

import ezdxf

from .config import AnalysisConfig, ConfigurationInvalid
from .curves import RawCurve, scale_curve
from .dxf_parser import DXFParser, ParsedGeometry
from .normalizer import normalize
from .wall_detector import WallDetector
from .wall_merger import merge_collinear_walls
from .opening_detector import OpeningClassifier
from .result_builder import FloorPlanResult, build_result
from .wall_candidates import WallCandidate, find_wall_candidates

logger = logging.getLogger(__name__)

VECTOR_FORMATS = {".dxf"}
ALL_FORMATS    = VECTOR_FORMATS


def analyze_floor_plan(curves: list[RawCurve],
                       config: AnalysisConfig | None = None) -> FloorPlanResult:
    """Run all stages on already-extracted curves.

    Raises ConfigurationInvalid for unusable settings; everything else,
    including an empty drawing, produces a result.
    """
    config = (config or AnalysisConfig()).validate()
    geometry = normalize(curves, config)
    candidates = WallDetector(config).detect(geometry.lines)
    walls = merge_collinear_walls(candidates, config)
    doors, windows = OpeningClassifier(config).classify(walls, geometry.arcs)
    return build_result(geometry, walls, doors, windows, config)


@dataclass
class PipelineResult:
    success: bool
    result:  FloorPlanResult | None = None
    processing_time_ms: float = 0.0
    error:   str | None = None
    warnings: list[str] = field(default_factory=list)
    source_type:   str = "unknown"
    applied_scale: float = 1.0
    units:   str = "unknown"

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error, "warnings": self.warnings}
        return {
            "success": True,
            "processing_time_ms": round(self.processing_time_ms, 1),
            "warnings":    self.warnings,
            "source_type": self.source_type,
            "applied_scale": self.applied_scale,
            "units": self.units,
            **(self.result.to_dict() if self.result else {}),
        }


class ProcessingPipeline:
    def __init__(self, config: AnalysisConfig | None = None, scale: float | None = None):
        """
        config: analysis settings in feet (or whatever unit `scale` maps to)
        scale:  drawing units → analysis units. None = derive from $INSUNITS.
        """
        self.config = config or AnalysisConfig()
        self.scale = scale

    def run(self, filepath: str) -> PipelineResult:
        t0 = time.perf_counter()
        warnings: list[str] = []

        try:
            geometry = self._load(filepath, warnings)
            if isinstance(geometry, PipelineResult):
                return geometry

            s = self._resolve_scale(geometry, warnings)
            curves = geometry.curves if s == 1.0 else [scale_curve(c, s) for c in geometry.curves]

            if geometry.ignored:
                warnings.append(f"Ignored {geometry.ignored} likely annotation/dimension curves.")

            result = self._analyze(curves, warnings)
            return PipelineResult(
                success=True, result=result,
                processing_time_ms=(time.perf_counter() - t0) * 1000,
                warnings=warnings, source_type="dxf",
                applied_scale=s, units=geometry.units,
            )

        except ConfigurationInvalid as e:
            return PipelineResult(success=False, error=f"Invalid configuration: {e}",
                                  warnings=warnings,
                                  processing_time_ms=(time.perf_counter() - t0) * 1000)
        except Exception as e:
            logger.exception("Pipeline failed on %s", filepath)
            return PipelineResult(success=False, error=str(e), warnings=warnings,
                                  processing_time_ms=(time.perf_counter() - t0) * 1000)

    def run_curves(self, curves: list[RawCurve]) -> PipelineResult:
        t0 = time.perf_counter()
        warnings: list[str] = []
        try:
            result = self._analyze(curves, warnings)
        except ConfigurationInvalid as e:
            return PipelineResult(success=False, error=f"Invalid configuration: {e}",
                                  warnings=warnings, source_type="curves",
                                  processing_time_ms=(time.perf_counter() - t0) * 1000)
        except Exception as e:
            logger.exception("Pipeline failed on %d curves", len(curves or []))
            return PipelineResult(success=False, error=str(e), warnings=warnings,
                                  source_type="curves",
                                  processing_time_ms=(time.perf_counter() - t0) * 1000)
        return PipelineResult(success=True, result=result, warnings=warnings,
                              processing_time_ms=(time.perf_counter() - t0) * 1000,
                              source_type="curves")

    def candidates(self, filepath: str, min_wall_length: float = 3.0,
                   angle_tolerance_deg: float = 5.0) -> list[WallCandidate]:
        warnings: list[str] = []
        geometry = self._load(filepath, warnings)
        if isinstance(geometry, PipelineResult):
            raise ValueError(geometry.error)
        s = self._resolve_scale(geometry, warnings)
        lines = [scale_curve(ln, s) for ln in geometry.lines] if s != 1.0 else geometry.lines
        return find_wall_candidates(lines, min_wall_length, angle_tolerance_deg)

    # ── Internals ────────────────────────────────────────────────────────────

    def _analyze(self, curves, warnings) -> FloorPlanResult:
        result = analyze_floor_plan(curves, self.config)
        if not result.summary.total_lines and not result.summary.total_arcs:
            warnings.append("No usable lines or arcs in the drawing.")
        elif not result.walls:
            warnings.append(
                "No double-line walls matched the configured thicknesses. "
                "Check exteriorWallThickness / interiorWallThickness and the drawing units."
            )
        return result

    def _load(self, filepath, warnings) -> ParsedGeometry | PipelineResult:
        path = Path(filepath)
        if not path.exists():
            return PipelineResult(success=False, error=f"File not found: {filepath}")
        suffix = path.suffix.lower()
        if suffix not in ALL_FORMATS:
            return PipelineResult(success=False,
                error=f"Unsupported format '{suffix}'. Supported: {sorted(ALL_FORMATS)}")
        try:
            return DXFParser(filepath).parse()
        except (IOError, ezdxf.DXFError) as e:
            warnings.append(f"DXF parse error: {e}")
            return PipelineResult(success=False, error="Parsing failed", warnings=warnings)

    def _resolve_scale(self, geometry: ParsedGeometry, warnings) -> float:
        if self.scale is not None:
            return self.scale
        if geometry.feet_per_unit is None:
            warnings.append(
                f"Drawing units are '{geometry.units}', assuming feet. "
                "Pass scale=X if incorrect."
            )
            return 1.0
        if geometry.feet_per_unit != 1.0:
            warnings.append(f"Auto-scale applied: 1 {geometry.units} = "
                            f"{round(geometry.feet_per_unit, 6)} ft.")
        return geometry.feet_per_unit
