"""Reasoning-service boundary.

The service that reads the canvas image and writes a reply is external; this
module only defines the call shape and turns whatever comes back into a
validated ``ReasoningReply``.
"""

from __future__ import annotations

import inspect
import json
import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from inkspace.engine.context import CanvasMetadata
from inkspace.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class ReasoningReply(BaseModel):
    """What the service read on the canvas and what it wants written back."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    recognized_text: str = Field(..., alias="userText", description="Text read from the latest input")
    response_text: str = Field(..., alias="aiResponse", description="Reply to write on the canvas")


class ReasoningService(Protocol):
    async def respond(self, image: bytes, metadata: CanvasMetadata) -> ReasoningReply: ...


RawReply = Union[ReasoningReply, tuple[str, str], dict[str, Any], str]
ReasoningFunction = Callable[[bytes, CanvasMetadata], Union[RawReply, Awaitable[RawReply]]]


def parse_reply(text: str) -> ReasoningReply:
    """Parse a JSON reply, tolerating markdown fences and surrounding prose.

    Raises ExternalServiceError on invalid JSON or missing/mistyped fields.
    """
    cleaned = re.sub(r"^```(?:json)?\s*\n?", "", text.strip())
    cleaned = re.sub(r"\n?```\s*$", "", cleaned)
    cleaned = cleaned.strip()

    json_match = re.search(r"\{[\s\S]*\}", cleaned)
    if json_match:
        cleaned = json_match.group(0)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning("Reasoning reply is not valid JSON: %s", e)
        raise ExternalServiceError(f"Invalid JSON in reply: {e}", raw=text) from e

    return coerce_reply(data, raw=text)


def coerce_reply(data: RawReply, raw: str | None = None) -> ReasoningReply:
    """Normalize the shapes a service function may return."""
    if isinstance(data, ReasoningReply):
        return data
    if isinstance(data, str):
        return parse_reply(data)
    if isinstance(data, tuple):
        if len(data) != 2:
            raise ExternalServiceError(f"Expected (recognizedText, responseText), got {len(data)} items")
        data = {"userText": data[0], "aiResponse": data[1]}
    if not isinstance(data, dict):
        raise ExternalServiceError(f"Unsupported reply type: {type(data).__name__}", raw=raw)

    try:
        return ReasoningReply.model_validate(data)
    except ValidationError as e:
        logger.warning("Reasoning reply is missing required fields: %s", e.errors())
        raise ExternalServiceError(f"Missing required fields: {e}", raw=raw) from e


class FunctionReasoningService:
    """Adapts a plain (sync or async) function ``(image, metadata) -> reply``."""

    def __init__(self, fn: ReasoningFunction) -> None:
        self._fn = fn

    async def respond(self, image: bytes, metadata: CanvasMetadata) -> ReasoningReply:
        result = self._fn(image, metadata)
        if inspect.isawaitable(result):
            result = await result
        reply = coerce_reply(result)
        logger.info("Reasoning reply: read %r, responding %r", reply.recognized_text, reply.response_text)
        return reply
