"""
Wall Detector — parallel-pair matching for double-line CAD walls.

A drafted wall is two parallel lines one wall-thickness apart. For each
orientation class (H, V):

  1. Sort lines by their perpendicular coordinate (Y for H, X for V).
  2. For each unconsumed line i, scan j > i in sorted order. The scan stops
     as soon as the gap exceeds exterior + tolerance: nothing further down
     the sorted list can be closer.
  3. A gap within tolerance of the exterior thickness makes an exterior
     wall; otherwise within tolerance of the interior thickness makes an
     interior wall. Exterior is tested first, so a gap on the shared edge
     of both bands is exterior.
  4. The two lines must overlap lengthwise by at least min_overlap, which
     rejects offset parallels (hatching, dimension strings).
  5. Accepted pairs become a candidate segment over the overlap interval,
     centred between the two lines; both lines are consumed.

Consumption lives in a set of arena indices owned by the caller, not on the
lines themselves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging

from .config import AnalysisConfig
from .curves import Point2D
from .normalizer import ClassifiedLine, Orientation

logger = logging.getLogger(__name__)


class WallClass(str, Enum):
    EXTERIOR = "exterior"
    INTERIOR = "interior"


class OpeningKind(str, Enum):
    DOOR         = "door"
    WINDOW       = "window"
    UNCLASSIFIED = "unclassified"


@dataclass
class Opening:
    start: float                 # along the host wall's axis
    end:   float
    kind:  OpeningKind = OpeningKind.UNCLASSIFIED

    @property
    def width(self): return self.end - self.start
    @property
    def center(self): return (self.start + self.end) / 2

    def to_dict(self):
        return {"start": round(self.start, 2), "end": round(self.end, 2),
                "width": round(self.width, 2), "kind": self.kind.value}


@dataclass
class WallSegment:
    orientation: Orientation
    wall_class:  WallClass
    offset:      float            # centerline Y for H walls, X for V walls
    start:       float            # along the wall axis, start < end
    end:         float
    thickness:   float
    openings:    list[Opening] = field(default_factory=list)

    @property
    def length(self): return self.end - self.start

    def point_at(self, pos: float) -> Point2D:
        if self.orientation is Orientation.VERTICAL:
            return Point2D(self.offset, pos)
        return Point2D(pos, self.offset)

    @property
    def centerline_start(self): return self.point_at(self.start)
    @property
    def centerline_end(self): return self.point_at(self.end)

    def local(self, pt: Point2D) -> tuple[float, float]:
        """(along, across) coordinates of a point relative to this wall."""
        if self.orientation is Orientation.VERTICAL:
            return pt.y, pt.x - self.offset
        return pt.x, pt.y - self.offset

    def to_dict(self, inches_per_unit: float = 12.0):
        s, e = self.centerline_start, self.centerline_end
        return {"startX": round(s.x, 2), "startY": round(s.y, 2),
                "endX": round(e.x, 2), "endY": round(e.y, 2),
                "length": round(self.length, 2),
                "orientation": self.orientation.value,
                "thicknessInches": round(self.thickness * inches_per_unit, 1),
                "openings": [op.to_dict() for op in self.openings]}


def match_thickness(gap: float, config: AnalysisConfig) -> WallClass | None:
    """Thickness class for a measured gap. Exterior wins when both match."""
    if abs(gap - config.exterior_wall_thickness) <= config.tolerance:
        return WallClass.EXTERIOR
    if abs(gap - config.interior_wall_thickness) <= config.tolerance:
        return WallClass.INTERIOR
    return None


def pair_parallel_lines(lines: list[ClassifiedLine], orientation: Orientation,
                        config: AnalysisConfig, consumed: set[int] | None = None
                        ) -> list[WallSegment]:
    """Pair lines of one orientation into candidate wall segments.

    `consumed` holds arena indices already used by a pairing; it is updated
    in place so several passes can share it.
    """
    if orientation is Orientation.DIAGONAL:
        return []
    consumed = consumed if consumed is not None else set()
    ordered = sorted((ln for ln in lines if ln.orientation is orientation),
                     key=lambda ln: ln.perpendicular)
    limit = config.pair_search_limit
    segments = []

    for i, a in enumerate(ordered):
        if a.index in consumed:
            continue
        for j in range(i + 1, len(ordered)):
            b = ordered[j]
            if b.index in consumed:
                continue
            gap = b.perpendicular - a.perpendicular
            if gap > limit:
                break
            wall_class = match_thickness(gap, config)
            if wall_class is None:
                continue

            a0, a1 = a.span; b0, b1 = b.span
            lo, hi = max(a0, b0), min(a1, b1)
            if hi <= lo or hi - lo < config.min_overlap:
                continue

            segments.append(WallSegment(
                orientation=orientation, wall_class=wall_class,
                offset=(a.perpendicular + b.perpendicular) / 2,
                start=lo, end=hi, thickness=gap,
            ))
            consumed.add(a.index); consumed.add(b.index)
            break

    return segments


class WallDetector:
    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()
        self.consumed: set[int] = set()

    def detect(self, lines: list[ClassifiedLine]) -> list[WallSegment]:
        self.consumed = set()
        candidates = []
        for orientation in (Orientation.HORIZONTAL, Orientation.VERTICAL):
            found = pair_parallel_lines(lines, orientation, self.config, self.consumed)
            logger.debug("%d %s wall candidates", len(found), orientation.value)
            candidates.extend(found)
        logger.info("Paired %d wall candidates from %d lines", len(candidates), len(lines))
        return candidates
