from .config import KernelConfig, get_kernel_config, set_kernel_config
from .constants import PX_PER_CM, PX_PER_IN, PX_PER_MM
from .model import (
    CircleMeasure,
    CurveMeasure,
    Edge,
    EdgeMeasure,
    Figure,
    FigureIndex,
    Measures,
    MirrorLink,
    Node,
    RectMeasure,
    build_adjacency,
    cascade_delete,
    figure_signature,
    replace_figures,
)
from .transform import (
    Rect,
    figure_local_polyline,
    figure_world_polyline,
    local_to_world,
    union_bounding_box,
    world_bounding_box,
    world_to_local,
)
from .edge_length import EDGE_ANCHORS, edge_arc_length, set_edge_target_length
from .edge_convert import convert_edge_to_cubic, convert_edge_to_line
from .mirror import MirrorSyncState, SyncResult, create_mirror, reflect_figure, sync_mirrors
from .measures import compute_measures, with_measures
from .paper import (
    PAPER_SIZES,
    ExportSettings,
    PageSettingsError,
    filter_figures,
    paper_dimensions_cm,
    resolve_export_settings,
    safe_area_cm,
    safe_area_px,
)
from .labels import POINT_LABELS_MODES, NodeLabel, compute_node_labels, cycle_point_labels_mode, index_to_alpha_label, place_node_labels
from .tiling import TileContent, TileDescriptor, TilePlan, iter_tile_polylines, partition_tiles, plan_tile_grid, plan_tiles
from .commit import CommitResult, commit
from .validate import IntegrityWarning, ValidationError, check_integrity, validate_figures
from .serialization import Design, design_from_dict, design_to_dict, dump_design, figure_from_dict, figure_to_dict, load_design
from .shapes import (
    cubic_circle_figure,
    cubic_ellipse_figure,
    curve_figure,
    line_figure,
    polygon_circle_figure,
    rectangle_figure,
)
from .units import cm_to_px, format_cm, px_to_cm

__all__ = [
    'KernelConfig',
    'get_kernel_config',
    'set_kernel_config',
    'PX_PER_CM',
    'PX_PER_IN',
    'PX_PER_MM',
    'CircleMeasure',
    'CurveMeasure',
    'Edge',
    'EdgeMeasure',
    'Figure',
    'FigureIndex',
    'Measures',
    'MirrorLink',
    'Node',
    'RectMeasure',
    'build_adjacency',
    'cascade_delete',
    'figure_signature',
    'replace_figures',
    'Rect',
    'figure_local_polyline',
    'figure_world_polyline',
    'local_to_world',
    'union_bounding_box',
    'world_bounding_box',
    'world_to_local',
    'EDGE_ANCHORS',
    'edge_arc_length',
    'set_edge_target_length',
    'convert_edge_to_cubic',
    'convert_edge_to_line',
    'MirrorSyncState',
    'SyncResult',
    'create_mirror',
    'reflect_figure',
    'sync_mirrors',
    'compute_measures',
    'with_measures',
    'PAPER_SIZES',
    'ExportSettings',
    'PageSettingsError',
    'filter_figures',
    'paper_dimensions_cm',
    'resolve_export_settings',
    'safe_area_cm',
    'safe_area_px',
    'POINT_LABELS_MODES',
    'NodeLabel',
    'compute_node_labels',
    'cycle_point_labels_mode',
    'index_to_alpha_label',
    'place_node_labels',
    'TileContent',
    'TileDescriptor',
    'TilePlan',
    'iter_tile_polylines',
    'partition_tiles',
    'plan_tile_grid',
    'plan_tiles',
    'CommitResult',
    'commit',
    'IntegrityWarning',
    'ValidationError',
    'check_integrity',
    'validate_figures',
    'Design',
    'design_from_dict',
    'design_to_dict',
    'dump_design',
    'figure_from_dict',
    'figure_to_dict',
    'load_design',
    'cubic_circle_figure',
    'cubic_ellipse_figure',
    'curve_figure',
    'line_figure',
    'polygon_circle_figure',
    'rectangle_figure',
    'cm_to_px',
    'format_cm',
    'px_to_cm',
]
