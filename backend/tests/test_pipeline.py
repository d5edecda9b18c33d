"""
End-to-end tests: raw curves → FloorPlanResult, and DXF files through
ProcessingPipeline.

Run: pytest backend/tests/ -v
"""

import os
import sys
import math
import tempfile

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "..", "sample_data"))

import pytest

from cadplan.core.curves import Point2D, RawLine, RawArc
from cadplan.core.config import AnalysisConfig, ConfigurationInvalid
from cadplan.core.normalizer import normalize
from cadplan.core.wall_detector import WallClass, OpeningKind
from cadplan.core.result_builder import compute_bounds
from cadplan.core.pipeline import analyze_floor_plan, ProcessingPipeline

EXT = 10.5 / 12
INT = 4.5 / 12


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def make_line(x1, y1, x2, y2) -> RawLine:
    return RawLine(Point2D(x1, y1), Point2D(x2, y2))


def make_arc(cx, cy, r) -> RawArc:
    return RawArc(Point2D(cx, cy), r, Point2D(cx + r, cy), Point2D(cx, cy + r),
                  arc_length=r * math.pi / 2)


def wall_with_gap(gap_start, gap_end, t=EXT, y=0.0, x0=0.0, x1=40.0):
    return [make_line(x0, y, gap_start, y), make_line(x0, y + t, gap_start, y + t),
            make_line(gap_end, y, x1, y), make_line(gap_end, y + t, x1, y + t)]


def create_plan_dxf(filepath: str, units: int = 2, k: float = 1.0):
    """Two-line exterior wall with a door gap, drawn at scale k."""
    import ezdxf
    doc = ezdxf.new("R2010")
    doc.header["$INSUNITS"] = units
    msp = doc.modelspace()
    wall = {"layer": "A-WALL"}
    for x0, x1 in ((0, 20), (25, 40)):
        msp.add_line((x0 * k, 0), (x1 * k, 0), dxfattribs=wall)
        msp.add_line((x0 * k, EXT * k), (x1 * k, EXT * k), dxfattribs=wall)
    msp.add_line((0, -3 * k), (40 * k, -3 * k), dxfattribs={"layer": "DIMENSIONS"})
    doc.saveas(filepath)


# ─────────────────────────────────────────────────────────────────────────────
# Scenarios
# ─────────────────────────────────────────────────────────────────────────────

class TestScenarios:
    def test_door_gap_in_exterior_wall(self):
        result = analyze_floor_plan(wall_with_gap(20, 25))
        assert len(result.exterior_walls) == 1
        assert result.interior_walls == ()
        w = result.exterior_walls[0]
        assert w.length == pytest.approx(40)
        assert w.wall_class is WallClass.EXTERIOR
        assert len(w.openings) == 1
        op = w.openings[0]
        assert (op.start, op.end) == (20, 25)
        assert op.kind is OpeningKind.DOOR
        assert result.summary.door_count == 1
        assert result.summary.window_count == 0

    def test_three_foot_gap_exterior_is_window(self):
        result = analyze_floor_plan(wall_with_gap(20, 23))
        op = result.exterior_walls[0].openings[0]
        assert op.kind is OpeningKind.WINDOW
        assert result.summary.window_count == 1
        assert result.summary.door_count == 0

    def test_three_foot_gap_outside_window_range_unclassified(self):
        cfg = AnalysisConfig(window_min_width=4.0)
        result = analyze_floor_plan(wall_with_gap(20, 23), cfg)
        assert result.exterior_walls[0].openings[0].kind is OpeningKind.UNCLASSIFIED
        assert result.summary.window_count == 0

    def test_narrow_interior_gap_unclassified(self):
        result = analyze_floor_plan(wall_with_gap(20, 21, t=INT))
        w = result.interior_walls[0]
        assert w.openings[0].kind is OpeningKind.UNCLASSIFIED

    def test_swing_arc_turns_window_into_door(self):
        curves = wall_with_gap(20, 23) + [make_arc(20, EXT / 2, 3.0)]
        result = analyze_floor_plan(curves)
        assert result.exterior_walls[0].openings[0].kind is OpeningKind.DOOR
        assert result.summary.door_count == 1
        assert result.summary.window_count == 0
        assert result.summary.total_arcs == 1

    def test_zero_curves(self):
        result = analyze_floor_plan([])
        s = result.summary
        assert (s.total_lines, s.total_arcs, s.exterior_wall_count, s.interior_wall_count,
                s.door_count, s.window_count) == (0, 0, 0, 0, 0, 0)
        assert result.bounds.is_empty
        assert result.to_dict()["bounds"] == {"minX": 0, "minY": 0, "maxX": 0, "maxY": 0,
                                              "width": 0, "height": 0}
        assert result.to_dict()["exteriorWalls"] == []

    def test_only_degenerate_curves(self):
        result = analyze_floor_plan([make_line(0, 0, 0, 0), make_line(float("nan"), 0, 1, 1)])
        assert result.summary.total_lines == 0
        assert result.walls == ()

    def test_tie_break_at_band_edge(self):
        cfg = AnalysisConfig(exterior_wall_thickness=1.0, interior_wall_thickness=0.5,
                             tolerance=0.25)
        curves = [make_line(0, 0, 10, 0), make_line(0, 0.75, 10, 0.75)]
        for _ in range(3):
            result = analyze_floor_plan(curves, cfg)
            assert len(result.exterior_walls) == 1
            assert result.interior_walls == ()

    def test_small_room(self):
        curves = (
            [make_line(0, 0, 20, 0), make_line(0, EXT, 20, EXT)]                # bottom
            + [make_line(0, 15, 20, 15), make_line(0, 15 - EXT, 20, 15 - EXT)]  # top
            + [make_line(0, 0, 0, 15), make_line(EXT, 0, EXT, 15)]              # left
            + [make_line(20, 0, 20, 15), make_line(20 - EXT, 0, 20 - EXT, 15)]  # right
            + [make_line(10, EXT, 10, 15 - EXT), make_line(10 + INT, EXT, 10 + INT, 15 - EXT)]
        )
        result = analyze_floor_plan(curves)
        assert result.summary.exterior_wall_count == 4
        assert result.summary.interior_wall_count == 1
        assert result.interior_walls[0].thickness == pytest.approx(INT)


class TestResult:
    def test_bounds_include_diagonals(self):
        curves = wall_with_gap(20, 25) + [make_line(-5, -5, 3, 3)]
        result = analyze_floor_plan(curves)
        b = result.bounds
        assert (b.min_x, b.min_y, b.max_x, b.max_y) == (-5, -5, 40, EXT)
        assert b.width == 45

    def test_compute_bounds_empty(self):
        assert compute_bounds([]).is_empty

    def test_compute_bounds(self):
        geo = normalize([make_line(1, 2, 5, 2), make_line(3, -1, 3, 7)])
        b = compute_bounds(geo.lines)
        assert (b.min_x, b.min_y, b.max_x, b.max_y) == (1, -1, 5, 7)
        assert not b.is_empty

    def test_to_dict_shape(self):
        d = analyze_floor_plan(wall_with_gap(20, 25)).to_dict()
        assert set(d) == {"bounds", "summary", "exteriorWalls", "interiorWalls",
                          "doors", "windows"}
        wall = d["exteriorWalls"][0]
        assert wall["length"] == 40
        assert wall["thicknessInches"] == 10.5
        assert wall["orientation"] == "H"
        assert wall["openings"] == [{"start": 20, "end": 25, "width": 5, "kind": "door"}]
        assert d["summary"]["exteriorWallCount"] == 1
        assert d["doors"][0]["widthInches"] == 60
        assert d["doors"][0]["source"] == "opening"

    def test_result_is_frozen(self):
        result = analyze_floor_plan([])
        with pytest.raises(Exception):
            result.doors = ()


class TestConfiguration:
    def test_invalid_config_raises(self):
        cfg = AnalysisConfig(exterior_wall_thickness=0.5, interior_wall_thickness=0.45)
        with pytest.raises(ConfigurationInvalid):
            analyze_floor_plan(wall_with_gap(20, 25), cfg)

    def test_invalid_config_reported_by_pipeline(self):
        cfg = AnalysisConfig(tolerance=0.5)
        result = ProcessingPipeline(cfg).run_curves(wall_with_gap(20, 25))
        assert not result.success
        assert "configuration" in result.error.lower()
        assert result.source_type == "curves"

    def test_unexpected_error_reported_by_pipeline(self, monkeypatch):
        import cadplan.core.pipeline as pipeline_module

        def broken(curves, config):
            raise RuntimeError("stage failed")

        monkeypatch.setattr(pipeline_module, "normalize", broken)
        result = ProcessingPipeline().run_curves(wall_with_gap(20, 25))
        assert not result.success
        assert result.error == "stage failed"
        assert result.source_type == "curves"


# ─────────────────────────────────────────────────────────────────────────────
# Integration: pipeline on real DXF files
# ─────────────────────────────────────────────────────────────────────────────

class TestProcessingPipeline:
    def test_pipeline_missing_file(self):
        result = ProcessingPipeline().run("nonexistent.dxf")
        assert not result.success
        assert "not found" in result.error.lower()

    def test_pipeline_wrong_extension(self):
        with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as f:
            f.write(b"fake")
            path = f.name
        result = ProcessingPipeline().run(path)
        assert not result.success
        assert "unsupported" in result.error.lower()
        os.unlink(path)

    def test_pipeline_corrupt_dxf(self, tmp_path):
        path = tmp_path / "broken.dxf"
        path.write_text("not a dxf file")
        result = ProcessingPipeline().run(str(path))
        assert not result.success

    def test_pipeline_result_dict_on_error(self):
        d = ProcessingPipeline().run("bad_file.dxf").to_dict()
        assert d["success"] is False
        assert "error" in d

    def test_pipeline_with_dxf(self, tmp_path):
        path = str(tmp_path / "plan.dxf")
        create_plan_dxf(path)

        result = ProcessingPipeline().run(path)
        assert result.success
        assert result.units == "feet"
        assert result.applied_scale == 1.0
        assert result.result.summary.exterior_wall_count == 1
        assert result.result.exterior_walls[0].openings[0].kind is OpeningKind.DOOR
        assert any("annotation" in w for w in result.warnings)

        d = result.to_dict()
        assert d["success"] is True
        assert d["summary"]["doorCount"] == 1

    def test_pipeline_rescales_inches(self, tmp_path):
        path = str(tmp_path / "plan_in.dxf")
        create_plan_dxf(path, units=1, k=12.0)

        result = ProcessingPipeline().run(path)
        assert result.success
        assert result.applied_scale == pytest.approx(1 / 12)
        w = result.result.exterior_walls[0]
        assert w.length == pytest.approx(40)
        assert w.thickness == pytest.approx(EXT)

    def test_explicit_scale_overrides_units(self, tmp_path):
        path = str(tmp_path / "plan_in.dxf")
        create_plan_dxf(path, units=1, k=12.0)

        result = ProcessingPipeline(scale=1.0).run(path)
        assert result.success
        assert result.result.walls == ()
        assert any("thickness" in w for w in result.warnings)

    def test_wall_candidates_from_file(self, tmp_path):
        path = str(tmp_path / "plan.dxf")
        create_plan_dxf(path)
        found = ProcessingPipeline().candidates(path)
        assert len(found) == 4
        assert found[0].length == 20
        assert all(c.orientation == "horizontal" for c in found)

    def test_sample_floorplan(self, tmp_path):
        from generate_sample import create_sample_floorplan
        path = str(tmp_path / "sample.dxf")
        create_sample_floorplan(path)

        result = ProcessingPipeline().run(path)
        assert result.success
        s = result.result.summary
        assert s.exterior_wall_count == 4
        assert s.interior_wall_count == 2
        assert s.window_count == 3
        assert s.door_count == 4
        assert s.total_arcs == 4
