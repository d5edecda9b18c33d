"""
Opening Detector — classifies wall gaps as doors or windows.

Architectural conventions (imperial CAD floor plans):
  DOOR:   a gap in the wall plus a swing ARC. The arc is centred on the hinge,
          which sits on the wall at one jamb; its radius is the leaf width
          (~2'-0" to 3'-6").
  WINDOW: a gap in an EXTERIOR wall, 1'-6" to 8'-0" wide, with no swing.

Algorithm:
  1. Swing arcs with a door-sized radius are matched to the wall whose
     centerline passes nearest their centre (within door_wall_tolerance).
     Any opening on that wall containing the centre becomes a door, whatever
     the merger guessed.
  2. Remaining unclassified openings on exterior walls within the window
     width range become windows.
  3. Remaining unclassified openings on interior walls within the door
     width range become doors; others stay unclassified.
  4. Every swing arc is reported as a door (wall orientation None when it is
     not near any wall); door openings without an arc are reported too.

Only Opening.kind changes here; wall geometry is left alone.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import logging

from .config import AnalysisConfig
from .curves import Point2D, RawArc
from .normalizer import Orientation
from .wall_detector import Opening, OpeningKind, WallClass, WallSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Door:
    center:           Point2D
    width:            float
    wall_orientation: Optional[Orientation] = None
    swing_radius:     Optional[float] = None
    source:           str = "swing"     # "swing" | "opening"

    def to_dict(self, inches_per_unit: float = 12.0):
        return {"centerX": round(self.center.x, 2), "centerY": round(self.center.y, 2),
                "widthInches": round(self.width * inches_per_unit),
                "widthFeet": round(self.width, 2),
                "swingRadius": round(self.swing_radius, 2) if self.swing_radius is not None else None,
                "wallOrientation": self.wall_orientation.value if self.wall_orientation else None,
                "source": self.source}


@dataclass(frozen=True)
class Window:
    position:         Point2D
    width:            float
    wall_orientation: Orientation

    def to_dict(self, inches_per_unit: float = 12.0):
        return {"wallOrientation": self.wall_orientation.value,
                "position": {"x": round(self.position.x, 2), "y": round(self.position.y, 2)},
                "widthFeet": round(self.width, 2),
                "widthInches": round(self.width * inches_per_unit)}


class OpeningClassifier:
    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()

    def classify(self, walls: list[WallSegment],
                 arcs: list[RawArc]) -> tuple[list[Door], list[Window]]:
        doors = []
        confirmed: set[int] = set()     # id() of openings backed by a swing arc

        # ── Swing arcs ───────────────────────────────────────────────────────
        for arc in arcs:
            if not self.is_door_swing(arc):
                continue
            wall = self.find_wall(arc.center, walls)
            if wall is not None:
                pos, _ = wall.local(arc.center)
                for op in self._openings_at(wall, pos):
                    op.kind = OpeningKind.DOOR
                    confirmed.add(id(op))
            doors.append(Door(center=arc.center, width=arc.radius,
                              wall_orientation=wall.orientation if wall else None,
                              swing_radius=arc.radius, source="swing"))

        # ── Width rules ──────────────────────────────────────────────────────
        windows = []
        for wall in walls:
            for op in wall.openings:
                if op.kind is OpeningKind.UNCLASSIFIED:
                    op.kind = self._by_width(wall, op)
                if op.kind is OpeningKind.WINDOW:
                    windows.append(Window(position=wall.point_at(op.center), width=op.width,
                                          wall_orientation=wall.orientation))
                elif op.kind is OpeningKind.DOOR and id(op) not in confirmed:
                    doors.append(Door(center=wall.point_at(op.center), width=op.width,
                                      wall_orientation=wall.orientation, source="opening"))

        logger.info("Classified %d doors, %d windows", len(doors), len(windows))
        return doors, windows

    def is_door_swing(self, arc: RawArc) -> bool:
        return self.config.min_door_radius <= arc.radius <= self.config.max_door_radius

    def find_wall(self, pt: Point2D, walls: list[WallSegment]) -> WallSegment | None:
        """Wall whose centerline passes nearest pt, within door_wall_tolerance."""
        tol = self.config.door_wall_tolerance
        best = None; best_dist = float("inf")
        for wall in walls:
            along, across = wall.local(pt)
            if not (wall.start - tol <= along <= wall.end + tol):
                continue
            dist = abs(across)
            if dist <= tol and dist < best_dist:
                best = wall; best_dist = dist
        return best

    def _openings_at(self, wall: WallSegment, pos: float) -> list[Opening]:
        tol = self.config.door_wall_tolerance
        return [op for op in wall.openings if op.start - tol <= pos <= op.end + tol]

    def _by_width(self, wall: WallSegment, op: Opening) -> OpeningKind:
        c = self.config
        w = op.width
        if wall.wall_class is WallClass.EXTERIOR:
            if c.window_min_width <= w <= c.window_max_width:
                return OpeningKind.WINDOW
        elif c.min_door_radius <= w <= c.max_door_radius:
            return OpeningKind.DOOR
        return OpeningKind.UNCLASSIFIED
