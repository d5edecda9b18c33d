"""
Analysis configuration.

All lengths are in the drawing's unit, feet by default (Revit/imperial CAD).
Defaults follow common US residential drafting:
  exterior wall 10.5", interior wall 4.5", 2" matching tolerance,
  door leaves 2'-0" to 3'-6", windows 1'-6" to 8'-0".
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, fields
import math

EXTERIOR_WALL_THICKNESS = 10.5 / 12
INTERIOR_WALL_THICKNESS = 4.5 / 12
THICKNESS_TOLERANCE     = 2.0 / 12
MIN_LINE_LENGTH         = 0.5    # 6"
MIN_WALL_LENGTH         = 3.0
MIN_OVERLAP             = 1.0    # parallel lines must share at least 1' to form a wall
MIN_OPENING_GAP         = 0.25   # 3"; smaller breaks are drafting noise
MAX_MERGE_GAP           = 10.0   # larger breaks end the wall run
DOOR_WIDTH_THRESHOLD    = 4.0    # provisional door without swing evidence
WINDOW_MIN_WIDTH        = 1.5
WINDOW_MAX_WIDTH        = 8.0
MIN_DOOR_RADIUS         = 2.0
MAX_DOOR_RADIUS         = 3.5
DOOR_WALL_TOLERANCE     = 0.5    # swing centre to wall centerline
SNAP_GRID               = 0.5    # centerline grouping grid
ORIENTATION_RATIO       = 0.05
INCHES_PER_UNIT         = 12.0

# camelCase wire names → field names
_WIRE_KEYS = {
    "exteriorWallThickness": "exterior_wall_thickness",
    "interiorWallThickness": "interior_wall_thickness",
    "tolerance":             "tolerance",
    "minLineLength":         "min_line_length",
    "minWallLength":         "min_wall_length",
    "minOverlap":            "min_overlap",
    "minOpeningGap":         "min_opening_gap",
    "maxMergeGap":           "max_merge_gap",
    "doorWidthThreshold":    "door_width_threshold",
    "windowMinWidth":        "window_min_width",
    "windowMaxWidth":        "window_max_width",
    "minDoorRadius":         "min_door_radius",
    "maxDoorRadius":         "max_door_radius",
    "doorWallTolerance":     "door_wall_tolerance",
    "snapGrid":              "snap_grid",
    "orientationRatio":      "orientation_ratio",
    "inchesPerUnit":         "inches_per_unit",
}


class ConfigurationInvalid(ValueError):
    """Raised when analysis settings cannot produce a meaningful classification."""


@dataclass(frozen=True)
class AnalysisConfig:
    exterior_wall_thickness: float = EXTERIOR_WALL_THICKNESS
    interior_wall_thickness: float = INTERIOR_WALL_THICKNESS
    tolerance:               float = THICKNESS_TOLERANCE
    min_line_length:         float = MIN_LINE_LENGTH
    min_wall_length:         float = MIN_WALL_LENGTH
    min_overlap:             float = MIN_OVERLAP
    min_opening_gap:         float = MIN_OPENING_GAP
    max_merge_gap:           float = MAX_MERGE_GAP
    door_width_threshold:    float = DOOR_WIDTH_THRESHOLD
    window_min_width:        float = WINDOW_MIN_WIDTH
    window_max_width:        float = WINDOW_MAX_WIDTH
    min_door_radius:         float = MIN_DOOR_RADIUS
    max_door_radius:         float = MAX_DOOR_RADIUS
    door_wall_tolerance:     float = DOOR_WALL_TOLERANCE
    snap_grid:               float = SNAP_GRID
    orientation_ratio:       float = ORIENTATION_RATIO
    inches_per_unit:         float = INCHES_PER_UNIT

    @property
    def pair_search_limit(self) -> float:
        """Largest perpendicular gap the pair matcher will look at."""
        return self.exterior_wall_thickness + self.tolerance

    @classmethod
    def from_dict(cls, d: dict | None) -> "AnalysisConfig":
        """Build from wire (camelCase) or field (snake_case) keys; missing keys keep defaults."""
        if not d:
            return cls()
        names = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in d.items():
            name = _WIRE_KEYS.get(key, key)
            if name not in names:
                raise ConfigurationInvalid(f"Unknown configuration key '{key}'")
            if value is None:
                continue
            try:
                kwargs[name] = float(value)
            except (TypeError, ValueError):
                raise ConfigurationInvalid(f"'{key}' must be a number, got {value!r}")
        return cls(**kwargs)

    def to_dict(self) -> dict:
        snake = asdict(self)
        return {wire: snake[name] for wire, name in _WIRE_KEYS.items()}

    def validate(self) -> "AnalysisConfig":
        for f in fields(self):
            v = getattr(self, f.name)
            if not math.isfinite(v):
                raise ConfigurationInvalid(f"{f.name} must be finite, got {v}")
            if v < 0:
                raise ConfigurationInvalid(f"{f.name} must not be negative, got {v}")

        for name in ("exterior_wall_thickness", "interior_wall_thickness", "tolerance",
                     "min_line_length", "min_wall_length", "min_overlap", "max_merge_gap",
                     "snap_grid", "inches_per_unit"):
            if getattr(self, name) <= 0:
                raise ConfigurationInvalid(f"{name} must be positive")

        ext, inn, tol = (self.exterior_wall_thickness, self.interior_wall_thickness,
                         self.tolerance)
        if inn >= ext:
            raise ConfigurationInvalid(
                f"interior thickness ({inn}) must be smaller than exterior thickness ({ext})")
        if inn - tol <= 0:
            raise ConfigurationInvalid(
                f"interior band [{inn - tol}, {inn + tol}] reaches zero; "
                "overlapping duplicate lines would pair as walls")
        # Touching bands are allowed: a gap on the shared edge resolves to exterior.
        if ext - tol < inn + tol:
            raise ConfigurationInvalid(
                f"exterior band [{ext - tol}, {ext + tol}] overlaps "
                f"interior band [{inn - tol}, {inn + tol}]")

        if self.min_opening_gap >= self.max_merge_gap:
            raise ConfigurationInvalid("min_opening_gap must be smaller than max_merge_gap")
        if self.window_min_width > self.window_max_width:
            raise ConfigurationInvalid("window_min_width exceeds window_max_width")
        if self.min_door_radius > self.max_door_radius:
            raise ConfigurationInvalid("min_door_radius exceeds max_door_radius")
        if self.orientation_ratio >= 1:
            raise ConfigurationInvalid("orientation_ratio must be below 1")
        return self
