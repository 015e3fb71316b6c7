"""Session factory: wires settings, glyph source, canvas and reasoning service."""

from __future__ import annotations

import logging
from dataclasses import replace

from dotenv import load_dotenv

from inkspace.config import Settings, settings
from inkspace.engine.config import LayoutConfig
from inkspace.engine.session import InkSession, ResultCallback
from inkspace.engine.sink import InkCanvas
from inkspace.engine.synthesis import GlyphSynthesizer
from inkspace.outline.font_source import FontGlyphSource
from inkspace.reasoning.service import ReasoningService

logger = logging.getLogger(__name__)


def configure_logging(config: Settings = settings) -> None:
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, config.inkspace_log_level.upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def layout_config(config: Settings = settings) -> LayoutConfig:
    """LayoutConfig with the settings-controlled fields applied."""
    return replace(
        LayoutConfig(),
        debounce_seconds=config.debounce_seconds,
        content_width=config.content_width,
        content_height=config.content_height,
    )


def create_session(
    reasoning: ReasoningService,
    canvas: InkCanvas | None = None,
    on_result: ResultCallback | None = None,
    config: Settings = settings,
) -> InkSession:
    layout = layout_config(config)
    source = FontGlyphSource(config.font_path or None, size=config.font_size)
    synthesizer = GlyphSynthesizer(source, layout)
    session = InkSession(
        canvas if canvas is not None else InkCanvas(),
        reasoning,
        synthesizer,
        config=layout,
        auto_send=config.auto_send,
        on_result=on_result,
    )
    logger.info(
        "Session ready (env=%s, font=%s, auto_send=%s)",
        config.inkspace_env,
        source.font_path,
        config.auto_send,
    )
    return session
