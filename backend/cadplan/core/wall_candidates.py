"""
Wall candidates — a quick look at which lines could be walls.

Keeps lines that are long enough and within an angular tolerance of
horizontal or vertical, snaps them onto the exact axis (mean Y for
horizontal, mean X for vertical) and returns them longest first. Useful for
inspecting a drawing before choosing thickness settings.
"""

from __future__ import annotations
from dataclasses import dataclass
import math

from .curves import Point2D, RawLine


@dataclass(frozen=True)
class WallCandidate:
    start:          Point2D
    end:            Point2D
    length:         float
    orientation:    str          # "horizontal" | "vertical"
    original_angle: float        # degrees, [0, 180)

    def to_dict(self):
        return {"startX": round(self.start.x, 4), "startY": round(self.start.y, 4),
                "endX": round(self.end.x, 4), "endY": round(self.end.y, 4),
                "length": round(self.length, 4), "orientation": self.orientation,
                "originalAngleDegrees": round(self.original_angle, 2)}


def line_angle(ln: RawLine) -> float:
    return math.degrees(math.atan2(ln.end.y - ln.start.y, ln.end.x - ln.start.x)) % 180


def find_wall_candidates(lines: list[RawLine], min_wall_length: float = 3.0,
                         angle_tolerance_deg: float = 5.0) -> list[WallCandidate]:
    out = []
    for ln in lines:
        if not (ln.length >= min_wall_length):
            continue
        a = line_angle(ln)
        horizontal = a < angle_tolerance_deg or a > 180 - angle_tolerance_deg
        vertical = abs(a - 90) < angle_tolerance_deg
        if not (horizontal or vertical):
            continue
        s, e = ln.start, ln.end
        if horizontal:
            y = (s.y + e.y) / 2
            s, e = Point2D(s.x, y), Point2D(e.x, y)
        else:
            x = (s.x + e.x) / 2
            s, e = Point2D(x, s.y), Point2D(x, e.y)
        out.append(WallCandidate(s, e, ln.length,
                                 "horizontal" if horizontal else "vertical", a))
    out.sort(key=lambda c: c.length, reverse=True)
    return out
