"""Canvas snapshot rendering."""

from inkspace.render.snapshot import (
    CanvasCapture,
    build_canvas_svg,
    capture_canvas,
    render_png,
    to_jpeg,
)

__all__ = ["CanvasCapture", "build_canvas_svg", "capture_canvas", "render_png", "to_jpeg"]
