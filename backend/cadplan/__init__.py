"""CAD floor-plan reconstruction: double-line walls, doors and windows from raw CAD geometry."""

__version__ = "0.3.0"
