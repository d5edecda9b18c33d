"""
Generates a sample double-line floor plan DXF (feet) for testing.

Run: python generate_sample.py
Output: sample_floorplan.dxf
"""

import ezdxf

EXT = 10.5 / 12   # exterior wall thickness (ft)
INT = 4.5 / 12    # interior wall thickness (ft)


def create_sample_floorplan(output_path="sample_floorplan.dxf"):
    doc = ezdxf.new("R2010")
    doc.header["$INSUNITS"] = 2   # feet

    msp = doc.modelspace()
    doc.layers.add("A-WALL", color=7)
    doc.layers.add("A-DOOR", color=2)
    doc.layers.add("A-DIMS", color=3)

    wall = {"layer": "A-WALL"}
    door = {"layer": "A-DOOR"}

    def h_wall(x0, x1, y, t, gaps=()):
        """Horizontal wall from x0 to x1, outer face at y, broken at gaps."""
        cuts = [x0] + [v for g in gaps for v in g] + [x1]
        for a, b in zip(cuts[::2], cuts[1::2]):
            msp.add_line((a, y), (b, y), dxfattribs=wall)
            msp.add_line((a, y + t), (b, y + t), dxfattribs=wall)

    def v_wall(y0, y1, x, t, gaps=()):
        cuts = [y0] + [v for g in gaps for v in g] + [y1]
        for a, b in zip(cuts[::2], cuts[1::2]):
            msp.add_line((x, a), (x, b), dxfattribs=wall)
            msp.add_line((x + t, a), (x + t, b), dxfattribs=wall)

    # ─────────────────────────────────────────────
    # Exterior shell 40' x 30'
    # ─────────────────────────────────────────────
    h_wall(0, 40, 0, EXT, gaps=[(6, 9), (20, 25)])      # front: 3' window, 5' entry
    h_wall(0, 40, 30 - EXT, EXT, gaps=[(12, 15.5)])     # rear: 3.5' window
    v_wall(0, 30, 0, EXT, gaps=[(10, 13)])              # left: 3' window
    v_wall(0, 30, 40 - EXT, EXT)                        # right: solid

    # ─────────────────────────────────────────────
    # Interior partitions
    # ─────────────────────────────────────────────
    v_wall(EXT, 30 - EXT, 24, INT, gaps=[(12, 15)])     # 3' door
    h_wall(24 + INT, 40 - EXT, 16, INT, gaps=[(30, 33)])

    # ─────────────────────────────────────────────
    # Door swings (hinge on the wall centerline, radius = leaf width)
    # ─────────────────────────────────────────────
    msp.add_arc((24 + INT / 2, 12), radius=3.0, start_angle=0, end_angle=90, dxfattribs=door)
    msp.add_arc((30, 16 + INT / 2), radius=3.0, start_angle=90, end_angle=180, dxfattribs=door)
    msp.add_arc((20, EXT / 2), radius=2.5, start_angle=0, end_angle=90, dxfattribs=door)
    msp.add_arc((22.5, EXT / 2), radius=2.5, start_angle=90, end_angle=180, dxfattribs=door)

    # Dimension string — ignored by the parser
    msp.add_line((0, -3), (40, -3), dxfattribs={"layer": "A-DIMS"})

    doc.saveas(output_path)
    print(f"Sample floor plan saved to: {output_path}")
    print("   40' x 30' shell, 10.5\" exterior / 4.5\" interior walls")
    print("   Layers: A-WALL, A-DOOR, A-DIMS")


if __name__ == "__main__":
    create_sample_floorplan()
