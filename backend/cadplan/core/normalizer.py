"""
Geometry Normalizer — orientation classification and curve cleanup.

Every line gets an orientation from its extents:
  H  if dy <= length * ratio
  V  if dx <= length * ratio
  D  otherwise
Diagonals are kept (they still count toward the drawing extent) but the pair
matcher never looks at them.

Degenerate input (NaN / infinite coordinates, zero length, sub-threshold
curves) is dropped here and never reaches the later stages.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import logging
import math

from .curves import RawArc, RawCurve, RawLine
from .config import AnalysisConfig

logger = logging.getLogger(__name__)


class Orientation(str, Enum):
    HORIZONTAL = "H"
    VERTICAL   = "V"
    DIAGONAL   = "D"


@dataclass(frozen=True)
class ClassifiedLine:
    index:       int          # position in NormalizedGeometry.lines
    line:        RawLine
    orientation: Orientation

    @property
    def perpendicular(self) -> float:
        """Coordinate across the line: mean Y for H lines, mean X for V lines."""
        s, e = self.line.start, self.line.end
        if self.orientation is Orientation.VERTICAL:
            return (s.x + e.x) / 2
        return (s.y + e.y) / 2

    @property
    def span(self) -> tuple[float, float]:
        """(min, max) along the line's axis."""
        s, e = self.line.start, self.line.end
        if self.orientation is Orientation.VERTICAL:
            return min(s.y, e.y), max(s.y, e.y)
        return min(s.x, e.x), max(s.x, e.x)


@dataclass
class NormalizedGeometry:
    lines:   list[ClassifiedLine] = field(default_factory=list)
    arcs:    list[RawArc]         = field(default_factory=list)
    skipped: int = 0

    def by_orientation(self, orientation: Orientation) -> list[ClassifiedLine]:
        return [ln for ln in self.lines if ln.orientation is orientation]


def _finite(*vals) -> bool:
    return all(math.isfinite(v) for v in vals)


def classify_orientation(dx: float, dy: float, length: float,
                         ratio: float = 0.05) -> Orientation:
    if dy <= length * ratio: return Orientation.HORIZONTAL
    if dx <= length * ratio: return Orientation.VERTICAL
    return Orientation.DIAGONAL


def _usable_line(ln: RawLine, length: float, min_len: float) -> bool:
    s, e = ln.start, ln.end
    if not _finite(s.x, s.y, e.x, e.y, length):
        return False
    return length > 0 and length >= min_len


def _usable_arc(arc: RawArc, min_len: float) -> bool:
    c, s, e = arc.center, arc.start, arc.end
    if not _finite(c.x, c.y, s.x, s.y, e.x, e.y, arc.radius, arc.arc_length):
        return False
    return arc.radius > 0 and arc.arc_length > 0 and arc.arc_length >= min_len


def normalize(curves: list[RawCurve], config: AnalysisConfig | None = None) -> NormalizedGeometry:
    config = config or AnalysisConfig()
    result = NormalizedGeometry()

    for curve in curves or []:
        if isinstance(curve, RawArc):
            if _usable_arc(curve, config.min_line_length):
                result.arcs.append(curve)
            else:
                result.skipped += 1
                logger.debug("Skipping degenerate or short arc %r", curve)
            continue

        if not isinstance(curve, RawLine):
            result.skipped += 1
            continue

        # Supplied lengths are informational; geometry decides.
        dx = abs(curve.end.x - curve.start.x)
        dy = abs(curve.end.y - curve.start.y)
        length = math.hypot(dx, dy)
        if not _usable_line(curve, length, config.min_line_length):
            result.skipped += 1
            logger.debug("Skipping degenerate or short line %r", curve)
            continue

        orient = classify_orientation(dx, dy, length, config.orientation_ratio)
        result.lines.append(ClassifiedLine(len(result.lines), curve, orient))

    logger.info("Normalized %d lines, %d arcs (%d curves skipped)",
                len(result.lines), len(result.arcs), result.skipped)
    return result
