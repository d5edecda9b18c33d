"""
Raw curve types — the geometry handed to the pipeline by the CAD extractor.

A drawing arrives as an ordered list of lines and arcs in planar coordinates.
The wire form (JSON from the host bridge) is:

  {"kind": "line", "startX", "startY", "endX", "endY", "length"?}
  {"kind": "arc",  "centerX", "centerY", "radius",
                   "startX", "startY", "endX", "endY", "arcLength"?}

`curve_from_dict` parses that form; anything it cannot read comes back as
None so the caller can skip it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union
import logging
import math

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class RawLine:
    start:  Point2D
    end:    Point2D
    length: Optional[float] = None
    layer:  str = "0"

    def __post_init__(self):
        if self.length is None:
            object.__setattr__(self, "length", math.hypot(self.end.x - self.start.x,
                                                          self.end.y - self.start.y))


@dataclass(frozen=True)
class RawArc:
    center:     Point2D
    radius:     float
    start:      Point2D
    end:        Point2D
    arc_length: Optional[float] = None
    layer:      str = "0"

    def __post_init__(self):
        if self.arc_length is None:
            object.__setattr__(self, "arc_length", _arc_length(self))


RawCurve = Union[RawLine, RawArc]


def _arc_length(arc: RawArc) -> float:
    """Arc length from chord and radius (minor arc); NaN when undefined."""
    r = arc.radius
    if not (r > 0):
        return float("nan")
    chord = math.hypot(arc.end.x - arc.start.x, arc.end.y - arc.start.y)
    half = min(1.0, chord / (2 * r))
    return 2 * r * math.asin(half)


def _num(d: dict, key: str) -> float:
    return float(d[key])


def curve_from_dict(d: dict) -> RawCurve | None:
    """Parse one wire-format curve. Returns None for anything unreadable."""
    try:
        kind = str(d.get("kind", "line")).lower()
        start = Point2D(_num(d, "startX"), _num(d, "startY"))
        end   = Point2D(_num(d, "endX"),   _num(d, "endY"))
        layer = str(d.get("layer", "0"))
        if kind == "line":
            length = d.get("length")
            return RawLine(start, end, float(length) if length is not None else None, layer)
        if kind == "arc":
            arc_length = d.get("arcLength", d.get("length"))
            return RawArc(
                center=Point2D(_num(d, "centerX"), _num(d, "centerY")),
                radius=_num(d, "radius"),
                start=start, end=end,
                arc_length=float(arc_length) if arc_length is not None else None,
                layer=layer,
            )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.debug("Unreadable curve %r: %s", d, e)
        return None
    logger.debug("Unknown curve kind in %r", d)
    return None


def curves_from_dicts(items) -> list[RawCurve]:
    out = []
    for item in items or []:
        c = curve_from_dict(item)
        if c is not None:
            out.append(c)
    return out


def scale_curve(curve: RawCurve, s: float) -> RawCurve:
    """Uniformly scale a curve about the origin."""
    def p(pt): return Point2D(pt.x * s, pt.y * s)
    if isinstance(curve, RawArc):
        return RawArc(p(curve.center), curve.radius * s, p(curve.start), p(curve.end),
                      curve.arc_length * s, curve.layer)
    return RawLine(p(curve.start), p(curve.end), curve.length * s, curve.layer)
