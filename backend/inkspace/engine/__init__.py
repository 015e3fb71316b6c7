"""Inkspace layout and stroke synthesis engine."""

from inkspace.engine.config import LayoutConfig
from inkspace.engine.context import CanvasMetadata, Placement, Stroke, StrokeGroup, StrokePoint
from inkspace.engine.placement import place
from inkspace.engine.playback import PlaybackHandle, PlaybackState, play
from inkspace.engine.regions import analyze
from inkspace.engine.sink import InkCanvas, StrokeSink
from inkspace.engine.synthesis import GlyphSynthesizer

__all__ = [
    "LayoutConfig",
    "CanvasMetadata",
    "Placement",
    "Stroke",
    "StrokeGroup",
    "StrokePoint",
    "place",
    "PlaybackHandle",
    "PlaybackState",
    "play",
    "analyze",
    "InkCanvas",
    "StrokeSink",
    "GlyphSynthesizer",
]
