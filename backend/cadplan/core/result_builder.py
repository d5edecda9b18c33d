"""
Result Builder — drawing extent, counts and the final FloorPlanResult.

Bounds cover every normalized line (diagonals included) so the extent
represents the whole drawing, not just what became walls. An empty drawing
gets the all-zero sentinel.
"""

from __future__ import annotations
from dataclasses import dataclass
import json

from .config import AnalysisConfig
from .normalizer import ClassifiedLine, NormalizedGeometry
from .opening_detector import Door, Window
from .wall_detector import WallClass, WallSegment


@dataclass(frozen=True)
class Bounds:
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0
    is_empty: bool = True

    @property
    def width(self): return self.max_x - self.min_x
    @property
    def height(self): return self.max_y - self.min_y

    def to_dict(self):
        return {"minX": round(self.min_x, 2), "minY": round(self.min_y, 2),
                "maxX": round(self.max_x, 2), "maxY": round(self.max_y, 2),
                "width": round(self.width, 2), "height": round(self.height, 2)}


@dataclass(frozen=True)
class Summary:
    total_lines:         int = 0
    total_arcs:          int = 0
    exterior_wall_count: int = 0
    interior_wall_count: int = 0
    door_count:          int = 0
    window_count:        int = 0

    def to_dict(self):
        return {"totalLines": self.total_lines, "totalArcs": self.total_arcs,
                "exteriorWallCount": self.exterior_wall_count,
                "interiorWallCount": self.interior_wall_count,
                "doorCount": self.door_count, "windowCount": self.window_count}


@dataclass(frozen=True)
class FloorPlanResult:
    bounds:         Bounds
    summary:        Summary
    exterior_walls: tuple[WallSegment, ...] = ()
    interior_walls: tuple[WallSegment, ...] = ()
    doors:          tuple[Door, ...] = ()
    windows:        tuple[Window, ...] = ()
    inches_per_unit: float = 12.0

    @property
    def walls(self): return self.exterior_walls + self.interior_walls

    def to_dict(self):
        ipu = self.inches_per_unit
        return {"bounds": self.bounds.to_dict(),
                "summary": self.summary.to_dict(),
                "exteriorWalls": [w.to_dict(ipu) for w in self.exterior_walls],
                "interiorWalls": [w.to_dict(ipu) for w in self.interior_walls],
                "doors": [d.to_dict(ipu) for d in self.doors],
                "windows": [w.to_dict(ipu) for w in self.windows]}

    def to_json(self, indent=2):
        return json.dumps(self.to_dict(), indent=indent)


def compute_bounds(lines: list[ClassifiedLine]) -> Bounds:
    if not lines:
        return Bounds()
    xs = [p.x for ln in lines for p in (ln.line.start, ln.line.end)]
    ys = [p.y for ln in lines for p in (ln.line.start, ln.line.end)]
    return Bounds(min(xs), min(ys), max(xs), max(ys), is_empty=False)


def build_result(geometry: NormalizedGeometry, walls: list[WallSegment],
                 doors: list[Door], windows: list[Window],
                 config: AnalysisConfig | None = None) -> FloorPlanResult:
    config = config or AnalysisConfig()
    exterior = tuple(w for w in walls if w.wall_class is WallClass.EXTERIOR)
    interior = tuple(w for w in walls if w.wall_class is WallClass.INTERIOR)
    summary = Summary(
        total_lines=len(geometry.lines), total_arcs=len(geometry.arcs),
        exterior_wall_count=len(exterior), interior_wall_count=len(interior),
        door_count=len(doors), window_count=len(windows),
    )
    return FloorPlanResult(
        bounds=compute_bounds(geometry.lines), summary=summary,
        exterior_walls=exterior, interior_walls=interior,
        doors=tuple(doors), windows=tuple(windows),
        inches_per_unit=config.inches_per_unit,
    )
