"""
DXF Parser — extracts raw 2D lines and arcs from a DXF file.
Handles: LINE, LWPOLYLINE, POLYLINE, ARC, and INSERT (block references are
exploded into world coordinates, nested up to MAX_BLOCK_DEPTH).
Annotation layers (dimensions, grids, axes) are skipped.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
import logging
import math

try:
    import ezdxf
except ImportError:
    raise ImportError("ezdxf required: pip install ezdxf")

from .curves import Point2D, RawArc, RawCurve, RawLine

logger = logging.getLogger(__name__)

MAX_BLOCK_DEPTH = 8

# $INSUNITS code → (name, feet per drawing unit)
INSUNITS = {
    0: ("unitless", None),
    1: ("inches",   1 / 12),
    2: ("feet",     1.0),
    4: ("mm",       1 / 304.8),
    5: ("cm",       1 / 30.48),
    6: ("meters",   1 / 0.3048),
}


@dataclass
class ParsedGeometry:
    curves:  list[RawCurve] = field(default_factory=list)
    ignored: int = 0                 # curves on annotation layers
    units:   str = "unknown"
    feet_per_unit: Optional[float] = None
    bounds:  Optional[dict] = None

    @property
    def lines(self): return [c for c in self.curves if isinstance(c, RawLine)]
    @property
    def arcs(self): return [c for c in self.curves if isinstance(c, RawArc)]


# ── Layer classification ──────────────────────────────────────────────────────

def is_annotation_layer(name: str) -> bool:
    n = name.lower()
    for kw in ("dim", "dimension", "measure", "cote", "cota", "annot", "axis", "grid"):
        if kw in n: return True
    return False


# ── Entity conversion ─────────────────────────────────────────────────────────

def _line(p, q, layer) -> RawLine:
    return RawLine(Point2D(p[0], p[1]), Point2D(q[0], q[1]), layer=layer)


def _arc(entity, layer) -> RawArc:
    c = entity.dxf.center
    r = entity.dxf.radius
    s = math.radians(entity.dxf.start_angle)
    e = math.radians(entity.dxf.end_angle)
    if e <= s:
        e += 2 * math.pi
    sp, ep = entity.start_point, entity.end_point
    return RawArc(center=Point2D(c.x, c.y), radius=r,
                  start=Point2D(sp.x, sp.y), end=Point2D(ep.x, ep.y),
                  arc_length=r * (e - s), layer=layer)


def _polyline_points(entity) -> list:
    try:
        return [(p[0], p[1]) for p in entity.get_points("xy")]
    except AttributeError:
        return [(v.dxf.location.x, v.dxf.location.y) for v in entity.vertices]


def _is_closed(entity) -> bool:
    closed = getattr(entity, "is_closed", None)
    if closed is None:
        closed = getattr(entity, "closed", False)
    return bool(closed)


# ── Main parser ───────────────────────────────────────────────────────────────

class DXFParser:
    def __init__(self, filepath: str):
        self.filepath = filepath

    def parse(self) -> ParsedGeometry:
        doc = ezdxf.readfile(self.filepath)
        result = ParsedGeometry()
        result.units, result.feet_per_unit = self._units(doc)

        for entity in doc.modelspace():
            for curve in self._to_curves(entity, depth=0):
                if is_annotation_layer(curve.layer):
                    result.ignored += 1
                else:
                    result.curves.append(curve)

        result.bounds = self._bounds(result.lines)
        logger.info("Parsed %s: %d curves (%d on annotation layers), units=%s",
                    self.filepath, len(result.curves), result.ignored, result.units)
        return result

    def _to_curves(self, entity, depth: int) -> list[RawCurve]:
        t = entity.dxftype()
        layer = getattr(entity.dxf, "layer", "0")
        try:
            if t == "LINE":
                s, e = entity.dxf.start, entity.dxf.end
                return [_line((s.x, s.y), (e.x, e.y), layer)]

            if t in ("LWPOLYLINE", "POLYLINE"):
                pts = _polyline_points(entity)
                out = [_line(pts[i], pts[i + 1], layer) for i in range(len(pts) - 1)]
                if _is_closed(entity) and len(pts) >= 3:
                    out.append(_line(pts[-1], pts[0], layer))
                return out

            if t == "ARC":
                return [_arc(entity, layer)]

            if t == "INSERT":
                if depth >= MAX_BLOCK_DEPTH:
                    logger.debug("Block nesting too deep at %s", entity.dxf.name)
                    return []
                out = []
                for sub in entity.virtual_entities():
                    out.extend(self._to_curves(sub, depth + 1))
                return out
        except (AttributeError, ValueError, ezdxf.DXFError) as e:
            logger.debug("Skipping %s on layer %s: %s", t, layer, e)
        return []

    def _units(self, doc) -> tuple[str, Optional[float]]:
        code = doc.header.get("$INSUNITS", 0)
        return INSUNITS.get(code, (f"code:{code}", None))

    def _bounds(self, lines: list[RawLine]) -> Optional[dict]:
        if not lines:
            return None
        xs = [ln.start.x for ln in lines] + [ln.end.x for ln in lines]
        ys = [ln.start.y for ln in lines] + [ln.end.y for ln in lines]
        return {"minx": min(xs), "miny": min(ys), "maxx": max(xs), "maxy": max(ys)}
