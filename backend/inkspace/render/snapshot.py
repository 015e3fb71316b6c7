"""Annotated canvas snapshot: SVG layers, then PNG via cairosvg, then JPEG via Pillow.

The image is what the reasoning service looks at, so the annotations come
from the same CanvasMetadata the placement solver uses: the newest strokes are
highlighted and boxed, occupied and empty areas are tinted, and a labelled
coordinate grid lets the service refer to positions.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from xml.sax.saxutils import escape

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import CanvasMetadata, Stroke
from inkspace.engine.regions import analyze
from inkspace.utils.geometry import Rect, inset

logger = logging.getLogger(__name__)

_HIGHLIGHT_FILL = "#FFEB3B"
_LATEST_BOX = "#FF9800"
_OCCUPIED_FILL = "#F44336"
_GRID_STROKE = "#2196F3"
_EMPTY_FILL = "#4CAF50"


@dataclass(frozen=True)
class CanvasCapture:
    """Everything one reasoning call needs."""

    image: bytes
    metadata: CanvasMetadata
    svg: str


def _stroke_path(stroke: Stroke, dx: float, dy: float) -> str:
    pts = stroke.points
    if not pts:
        return ""
    color = stroke.ink.color
    if len(pts) == 1:
        p = pts[0]
        return (
            f'<circle cx="{p.x - dx:.1f}" cy="{p.y - dy:.1f}" r="{stroke.ink.width / 2:.1f}" '
            f'fill="{color}"/>'
        )
    d = f"M {pts[0].x - dx:.1f},{pts[0].y - dy:.1f}"
    for p in pts[1:]:
        d += f" L {p.x - dx:.1f},{p.y - dy:.1f}"
    return (
        f'<path d="{d}" fill="none" stroke="{color}" stroke-width="{stroke.ink.width:.1f}" '
        f'stroke-linecap="round" stroke-linejoin="round"/>'
    )


def _rect_el(r: Rect, dx: float, dy: float, **attrs: str) -> str:
    extra = " ".join(f'{k.replace("_", "-")}="{v}"' for k, v in attrs.items())
    return (
        f'<rect x="{r.x - dx:.1f}" y="{r.y - dy:.1f}" '
        f'width="{r.width:.1f}" height="{r.height:.1f}" {extra}/>'
    )


def _text_el(x: float, y: float, text: str, fill: str, size: int = 10) -> str:
    return (
        f'<text x="{x:.1f}" y="{y:.1f}" font-family="sans-serif" font-size="{size}" '
        f'fill="{fill}">{escape(text)}</text>'
    )


def build_canvas_svg(
    strokes: Sequence[Stroke],
    metadata: CanvasMetadata,
    config: LayoutConfig | None = None,
) -> str:
    """Render strokes and layout annotations as a standalone SVG document.

    Coordinates are shifted so the canvas origin maps to (0, 0).
    """
    config = config or LayoutConfig()
    dx, dy = metadata.canvas_origin
    width, height = metadata.canvas_size
    split = len(strokes) - metadata.recent_count
    older, recent = strokes[:split], strokes[split:]
    recent_region = metadata.recent_writing_region

    parts: list[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:.0f}" height="{height:.0f}" '
        f'viewBox="0 0 {width:.1f} {height:.1f}">',
        f'<rect x="0" y="0" width="{width:.1f}" height="{height:.1f}" fill="#FFFFFF"/>',
    ]

    parts.append('<g id="older-strokes">')
    parts.extend(_stroke_path(s, dx, dy) for s in older)
    parts.append("</g>")

    if recent_region is not None:
        highlight = inset(recent_region, -config.highlight_padding)
        parts.append(_rect_el(highlight, dx, dy, fill=_HIGHLIGHT_FILL, fill_opacity="0.4", rx="8"))

    parts.append('<g id="recent-strokes">')
    parts.extend(_stroke_path(s, dx, dy) for s in recent)
    parts.append("</g>")

    if recent_region is not None:
        box = inset(recent_region, -config.latest_box_padding)
        parts.append(
            _rect_el(box, dx, dy, fill="none", stroke=_LATEST_BOX, stroke_width="3", stroke_dasharray="8,4")
        )
        parts.append(_text_el(box.x - dx, box.y - dy - 4, "LATEST INPUT", _LATEST_BOX, size=12))

    parts.append('<g id="occupied">')
    for region in metadata.occupied_regions:
        padded = inset(region, -config.occupancy_padding)
        parts.append(_rect_el(padded, dx, dy, fill=_OCCUPIED_FILL, fill_opacity="0.08"))
    parts.append("</g>")

    cell = metadata.grid_cell_size
    parts.append('<g id="grid">')
    if cell > 0:
        x = 0.0
        while x <= width:
            parts.append(
                f'<line x1="{x:.1f}" y1="0" x2="{x:.1f}" y2="{height:.1f}" '
                f'stroke="{_GRID_STROKE}" stroke-opacity="0.3" stroke-width="0.5"/>'
            )
            parts.append(_text_el(x + 2, 10, f"{x + dx:.0f}", _GRID_STROKE, size=8))
            x += cell
        y = 0.0
        while y <= height:
            parts.append(
                f'<line x1="0" y1="{y:.1f}" x2="{width:.1f}" y2="{y:.1f}" '
                f'stroke="{_GRID_STROKE}" stroke-opacity="0.3" stroke-width="0.5"/>'
            )
            parts.append(_text_el(2, y + 10, f"{y + dy:.0f}", _GRID_STROKE, size=8))
            y += cell
    parts.append("</g>")

    parts.append(_text_el(width - 120, height - 8, f"Canvas: {width:.0f}×{height:.0f}", _GRID_STROKE))

    parts.append('<g id="empty">')
    for region in metadata.empty_regions:
        parts.append(_rect_el(region, dx, dy, fill=_EMPTY_FILL, fill_opacity="0.1"))
    parts.append("</g>")

    parts.append("</svg>")
    return "\n".join(p for p in parts if p)


def render_png(svg: str, width: int, height: int) -> bytes:
    """Render SVG string to PNG bytes using cairosvg."""
    import cairosvg

    try:
        return cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=width,
            output_height=height,
        )
    except Exception as e:
        logger.warning("Failed to render SVG to PNG: %s", e)
        raise


def to_jpeg(png_bytes: bytes, quality: int = 80) -> bytes:
    from PIL import Image

    image = Image.open(io.BytesIO(png_bytes)).convert("RGB")
    out = io.BytesIO()
    image.save(out, format="JPEG", quality=quality)
    return out.getvalue()


def capture_canvas(
    strokes: Sequence[Stroke],
    recent_count: int,
    config: LayoutConfig | None = None,
) -> CanvasCapture:
    """Analyze the canvas and render the annotated JPEG the reasoning service sees."""
    config = config or LayoutConfig()
    metadata = analyze(strokes, recent_count, config)
    svg = build_canvas_svg(strokes, metadata, config)
    width, height = metadata.canvas_size
    png = render_png(svg, max(1, round(width)), max(1, round(height)))
    image = to_jpeg(png)
    logger.debug("Captured canvas snapshot: %d bytes, %s", len(image), metadata.describe())
    return CanvasCapture(image=image, metadata=metadata, svg=svg)
