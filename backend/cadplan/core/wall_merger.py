"""
Collinear Merger — fuse same-centerline candidates into wall runs.

A wall with openings is drafted as several disjoint line pairs on one
centerline. Candidates are grouped by (orientation, class, centerline
snapped to a coarse grid), sorted along the axis and walked:

  gap >  max_merge_gap              → close the run, start a new one
  min_opening_gap < gap <= max      → record an opening, extend the run
  gap <= min_opening_gap            → extend (touching, overlapping, noise)

Openings of gap >= door_width_threshold start out as doors, narrower ones
as unclassified until the opening classifier looks at them.

Runs shorter than min_wall_length are dropped. Output order is
(group key, start), so merging the output again changes nothing.
"""

from __future__ import annotations
from dataclasses import replace
import collections
import logging

from .config import AnalysisConfig
from .wall_detector import Opening, OpeningKind, WallSegment

logger = logging.getLogger(__name__)


def snap(value: float, grid: float) -> float:
    return round(value / grid) * grid


def _group_key(seg: WallSegment, grid: float):
    return (seg.orientation.value, seg.wall_class.value, snap(seg.offset, grid))


def _provisional_kind(gap: float, config: AnalysisConfig) -> OpeningKind:
    return OpeningKind.DOOR if gap >= config.door_width_threshold else OpeningKind.UNCLASSIFIED


def _start_run(seg: WallSegment) -> WallSegment:
    return replace(seg, openings=[replace(op) for op in seg.openings])


def _merge_group(segs: list[WallSegment], config: AnalysisConfig) -> list[WallSegment]:
    runs = []
    run = None
    for seg in sorted(segs, key=lambda s: (s.start, s.end)):
        if run is None:
            run = _start_run(seg)
            continue

        gap = seg.start - run.end
        if gap > config.max_merge_gap:
            runs.append(run)
            run = _start_run(seg)
            continue

        if gap > config.min_opening_gap:
            run.openings.append(Opening(run.end, seg.start, _provisional_kind(gap, config)))
        run.openings.extend(replace(op) for op in seg.openings)
        run.end = max(run.end, seg.end)

    if run is not None:
        runs.append(run)

    kept = []
    for r in runs:
        if r.length >= config.min_wall_length:
            kept.append(r)
        else:
            logger.debug("Dropping short %s run at %.3f (%.3f long)",
                         r.orientation.value, r.offset, r.length)
    return kept


def merge_collinear_walls(segments: list[WallSegment],
                          config: AnalysisConfig | None = None) -> list[WallSegment]:
    config = config or AnalysisConfig()
    groups = collections.defaultdict(list)
    for seg in segments:
        groups[_group_key(seg, config.snap_grid)].append(seg)

    merged = []
    for key in sorted(groups):
        merged.extend(_merge_group(groups[key], config))

    logger.info("Merged %d candidates into %d walls", len(segments), len(merged))
    return merged
