"""Reasoning-service boundary: call shape and reply validation."""

from inkspace.reasoning.service import (
    FunctionReasoningService,
    ReasoningReply,
    ReasoningService,
    coerce_reply,
    parse_reply,
)

__all__ = [
    "FunctionReasoningService",
    "ReasoningReply",
    "ReasoningService",
    "coerce_reply",
    "parse_reply",
]
