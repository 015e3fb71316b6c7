"""Layout configuration: every tunable distance, threshold and delay."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LayoutConfig:
    """Constants shared by the analyzer, solver, synthesizer and scheduler.

    All distances are canvas points (Y grows downward).
    """

    # Working area
    canvas_padding: float = 100.0  # added around the union of all strokes
    default_canvas_size: float = 1000.0  # square used when there are no strokes

    # Empty-region grid
    grid_cell_size: float = 100.0
    proximity_margin: float = 20.0  # occupied rects grow by this before marking cells

    # Placement
    content_width: float = 500.0
    content_height: float = 80.0
    placement_padding: float = 40.0  # gap between anchor and candidate
    breathing_room: float = 10.0  # occupied rects grow by this for collision tests
    collision_overlap: float = 0.20  # >20% of the candidate's area = collision
    default_origin: tuple[float, float] = (50.0, 50.0)
    prior_response_min_width: float = 200.0
    prior_response_max_overlap: float = 0.30  # fraction of the region's own width

    # Synthesis
    line_height: float = 50.0
    space_width: float = 20.0
    glyph_spacing: float = 2.0  # added to every measured advance
    stroke_width: float = 2.5
    point_time_step: float = 0.01  # seconds between synthesized points

    # Playback
    space_delay: float = 0.02
    glyph_delay: float = 0.04
    complex_glyph_delay: float = 0.06
    complex_glyph_strokes: int = 5  # more strokes than this = complex glyph

    # Session
    debounce_seconds: float = 1.0

    # Snapshot annotations
    highlight_padding: float = 15.0
    latest_box_padding: float = 12.0
    occupancy_padding: float = 30.0
    max_described_regions: int = 5
