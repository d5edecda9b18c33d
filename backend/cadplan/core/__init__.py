from .curves import Point2D, RawLine, RawArc, RawCurve, curve_from_dict, curves_from_dicts
from .config import AnalysisConfig, ConfigurationInvalid
from .normalizer import normalize, ClassifiedLine, NormalizedGeometry, Orientation
from .wall_detector import WallDetector, WallSegment, WallClass, Opening, OpeningKind
from .wall_merger import merge_collinear_walls
from .opening_detector import OpeningClassifier, Door, Window
from .result_builder import FloorPlanResult, Bounds, Summary, build_result
from .wall_candidates import find_wall_candidates, WallCandidate
from .dxf_parser import DXFParser, ParsedGeometry
from .pipeline import analyze_floor_plan, ProcessingPipeline, PipelineResult, ALL_FORMATS
